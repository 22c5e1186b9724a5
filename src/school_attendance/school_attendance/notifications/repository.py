from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import Notification, NotificationRow


class NotificationRepository(Protocol):
    def create(self, notification: Notification) -> None:
        raise NotImplementedError

    def list_with_contacts(self) -> Sequence[NotificationRow]:
        """All notifications, newest first."""

        raise NotImplementedError

    def mark_sent(self, notification_id: str, sent_at: datetime) -> bool:
        raise NotImplementedError

    def count_pending(self) -> int:
        raise NotImplementedError
