from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance mark status stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"


class NotificationStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"


class NotificationKind(str, Enum):
    CONSECUTIVE_ABSENCE = "consecutive_absence"


class CycleState(str, Enum):
    """Lifecycle of the day cycle controller."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
