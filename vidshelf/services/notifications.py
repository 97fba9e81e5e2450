"""Transient status messages with expiry.

Messages are posted by the library service and shown by clients until they
expire; nothing here touches the collection.
"""

import itertools
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class NotificationLevel(str, Enum):
    """Severity of a status message."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    """A single transient status message."""

    id: int
    message: str
    level: NotificationLevel
    expires_at: float  # clock seconds

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def to_dict(self, now: float) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "level": self.level.value,
            "expires_in": round(max(0.0, self.expires_at - now), 3),
        }


class NotificationQueue:
    """Queue of status messages that auto-dismiss after their TTL."""

    def __init__(
        self,
        default_ttl: float = 5.0,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        """Initialize the queue.

        Args:
            default_ttl: Lifetime in seconds for messages posted without one.
            clock: Monotonic time source, injectable for tests.
        """
        self.default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._ids = itertools.count(1)
        self._items: List[Notification] = []

    def now(self) -> float:
        return self._clock()

    def post(
        self,
        message: str,
        level: NotificationLevel = NotificationLevel.ERROR,
        ttl: Optional[float] = None,
    ) -> Notification:
        """Post a message; errors are the default level."""
        now = self._clock()
        self._prune(now)
        notification = Notification(
            id=next(self._ids),
            message=message,
            level=level,
            expires_at=now + (self.default_ttl if ttl is None else ttl),
        )
        self._items.append(notification)
        return notification

    def active(self) -> List[Notification]:
        """Drop expired messages and return the rest, oldest first."""
        self._prune(self._clock())
        return list(self._items)

    def _prune(self, now: float) -> None:
        self._items = [n for n in self._items if not n.is_expired(now)]

    def clear(self) -> None:
        self._items.clear()
