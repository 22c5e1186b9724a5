from __future__ import annotations

import logging

from ..common.datetime_utils import Clock, now_local
from ..core.exceptions import NotFoundError
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Use case: review queued notifications and flag them as sent.

    Delivery (SMS/e-mail) is not performed; sending only flips the status.
    """

    def __init__(self, notifications: NotificationRepository, *, clock: Clock = now_local):
        self._notifications = notifications
        self._clock = clock

    def list_notifications(self):
        return self._notifications.list_with_contacts()

    def send(self, notification_id: str) -> None:
        if not self._notifications.mark_sent(notification_id, self._clock()):
            raise NotFoundError("Notification not found")
        logger.info("Notification %s sent", notification_id)

    def pending_count(self) -> int:
        return self._notifications.count_pending()
