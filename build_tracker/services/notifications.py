"""
Notification Module

The side channel through which the repository reports outcomes to the user
("Task created successfully", "Failed to fetch tasks"). Messages are logged
and kept in a bounded in-memory buffer that the API exposes for the UI.
"""
import logging
from collections import deque
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    level: NotificationLevel
    message: str
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class Notifier:
    """Bounded buffer of user-facing messages, newest last."""

    def __init__(self, maxlen: int = 50) -> None:
        self._items: Deque[Notification] = deque(maxlen=maxlen)

    def success(self, message: str) -> None:
        logger.info(message)
        self._items.append(Notification(level=NotificationLevel.SUCCESS, message=message))

    def error(self, message: str) -> None:
        logger.error(message)
        self._items.append(Notification(level=NotificationLevel.ERROR, message=message))

    def recent(self, limit: int = 20) -> List[Notification]:
        items = list(self._items)
        return items[-limit:] if limit > 0 else []

    def clear(self) -> None:
        self._items.clear()
