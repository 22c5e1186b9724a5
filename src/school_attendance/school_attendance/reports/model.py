from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class DailyReport:
    """Snapshot of one day's attendance. At most one per date; never mutated."""

    report_id: str
    report_date: date
    day_number: int
    total_students: int
    present_count: int
    absent_count: int
    attendance_rate: int
    generated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "date": self.report_date.isoformat(),
            "day_number": self.day_number,
            "total_students": self.total_students,
            "present_count": self.present_count,
            "absent_count": self.absent_count,
            "attendance_rate": self.attendance_rate,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
        }


@dataclass(frozen=True)
class DashboardStats:
    total_students: int
    present_today: int
    absent_today: int
    pending_notifications: int
    pending_absence_timers: int
    day_cycle_state: str

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "presentToday": self.present_today,
            "absentToday": self.absent_today,
            "pendingNotifications": self.pending_notifications,
            "pendingAbsenceTimers": self.pending_absence_timers,
            "dayCycleState": self.day_cycle_state,
        }
