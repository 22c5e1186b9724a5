from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_time
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceMark:
    """Domain entity: one student's attendance for one date. Immutable once written."""

    mark_id: str
    student_id: str
    student_name: str
    card_id: str
    mark_date: date
    mark_time: time
    status: AttendanceStatus
    auto_marked: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.mark_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "card_id": self.card_id,
            "date": self.mark_date.isoformat(),
            "timestamp": format_time(self.mark_time),
            "status": self.status.value,
            "auto_marked": self.auto_marked,
        }


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for listings: a mark joined with the student's class."""

    mark: AttendanceMark
    student_class: Optional[str] = None

    def to_dict(self) -> dict:
        data = self.mark.to_dict()
        data["class"] = self.student_class
        return data
