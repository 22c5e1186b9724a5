from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import DailyReport
from .repository import ReportRepository

_COLUMNS = "id, date, day_number, total_students, present_count, absent_count, attendance_rate, generated_at"


def _to_report(r: dict) -> DailyReport:
    return DailyReport(
        report_id=str(r["id"]),
        report_date=r["date"],
        day_number=int(r["day_number"]),
        total_students=int(r["total_students"]),
        present_count=int(r["present_count"]),
        absent_count=int(r["absent_count"]),
        attendance_rate=int(r["attendance_rate"]),
        generated_at=r.get("generated_at"),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, report_date: date) -> Optional[DailyReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_reports WHERE date=%s", (report_date,))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def list_all(self) -> Sequence[DailyReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_reports ORDER BY date DESC")
            return [_to_report(r) for r in fetchall(cur)]

    def last_day_number(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COALESCE(MAX(day_number), 0) AS day_number FROM daily_reports")
            r = fetchone(cur)
            return int(r["day_number"]) if r else 0

    def create(self, report: DailyReport) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO daily_reports(id, date, day_number, total_students, present_count, absent_count, attendance_rate)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        report.report_id,
                        report.report_date,
                        report.day_number,
                        report.total_students,
                        report.present_count,
                        report.absent_count,
                        report.attendance_rate,
                    ),
                )
            return True
        except mysql_errors.IntegrityError as exc:
            if is_duplicate_key(exc):
                return False
            raise
