from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import NotificationKind, NotificationStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification, NotificationRow
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: Notification) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(id, student_id, student_name, type, message, consecutive_absent_days, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    notification.notification_id,
                    notification.student_id,
                    notification.student_name,
                    notification.kind.value,
                    notification.message,
                    int(notification.consecutive_absent_days),
                    notification.status.value,
                ),
            )

    def list_with_contacts(self) -> Sequence[NotificationRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT n.id, n.student_id, n.student_name, n.type, n.message, n.consecutive_absent_days,
                       n.status, n.sent_date, n.created_at,
                       s.parent_phone, s.parent_email, s.class
                FROM notifications n
                JOIN students s ON n.student_id = s.id
                ORDER BY n.created_at DESC
                """
            )
            return [
                NotificationRow(
                    notification=Notification(
                        notification_id=str(r["id"]),
                        student_id=str(r["student_id"]),
                        student_name=r["student_name"],
                        kind=NotificationKind(r["type"]),
                        message=r.get("message") or "",
                        consecutive_absent_days=int(r.get("consecutive_absent_days") or 0),
                        status=NotificationStatus(r["status"]),
                        sent_at=r.get("sent_date"),
                        created_at=r.get("created_at"),
                    ),
                    parent_phone=r.get("parent_phone"),
                    parent_email=r.get("parent_email"),
                    student_class=r.get("class"),
                )
                for r in fetchall(cur)
            ]

    def mark_sent(self, notification_id: str, sent_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET status=%s, sent_date=%s WHERE id=%s",
                (NotificationStatus.SENT.value, sent_at, notification_id),
            )
            return cur.rowcount > 0

    def count_pending(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS count FROM notifications WHERE status=%s",
                (NotificationStatus.PENDING.value,),
            )
            r = fetchone(cur)
            return int(r["count"]) if r else 0
