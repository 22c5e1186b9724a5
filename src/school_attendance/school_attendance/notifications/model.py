from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationKind, NotificationStatus


@dataclass(frozen=True)
class Notification:
    """Queued parent notification. Only the send action mutates it (pending -> sent)."""

    notification_id: str
    student_id: str
    student_name: str
    kind: NotificationKind
    message: str
    consecutive_absent_days: int
    status: NotificationStatus = NotificationStatus.PENDING
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "type": self.kind.value,
            "message": self.message,
            "consecutive_absent_days": self.consecutive_absent_days,
            "status": self.status.value,
            "sent_date": self.sent_at.isoformat() if self.sent_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NotificationRow:
    """Read-model: notification joined with the parent contact details."""

    notification: Notification
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None
    student_class: Optional[str] = None

    def to_dict(self) -> dict:
        data = self.notification.to_dict()
        data.update(parent_phone=self.parent_phone, parent_email=self.parent_email, **{"class": self.student_class})
        return data


def consecutive_absence_message(student_name: str, days: int) -> str:
    return f"Alert: Your child {student_name} has been absent for {days} consecutive days."
