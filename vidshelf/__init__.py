"""vidshelf: personal YouTube video bookmarks with subtitle attachments."""

__version__ = "1.0.0"
