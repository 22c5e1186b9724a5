from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyReport


class ReportRepository(Protocol):
    def get_for_date(self, report_date: date) -> Optional[DailyReport]:
        raise NotImplementedError

    def list_all(self) -> Sequence[DailyReport]:
        """All reports, newest date first."""

        raise NotImplementedError

    def last_day_number(self) -> int:
        """Highest day number so far, 0 when there are no reports."""

        raise NotImplementedError

    def create(self, report: DailyReport) -> bool:
        """Insert the report; False when one already exists for the date."""

        raise NotImplementedError
