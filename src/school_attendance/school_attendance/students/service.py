from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from ..absence.scheduler import AbsenceScheduler
from ..common.validators import optional_str, require_non_empty
from ..core.exceptions import DuplicateIdentifierError, NotFoundError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: roster management (admin).

    Roster edits touch the absence timers directly: a new student is armed right away and
    a removed student's timer is cancelled, without waiting for the next day cycle.
    """

    def __init__(self, students: StudentRepository, absence_scheduler: AbsenceScheduler):
        self._students = students
        self._absence = absence_scheduler

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    def add_student(
        self,
        *,
        name: str,
        card_id: str,
        student_class: str,
        parent_phone: Optional[str] = None,
        parent_email: Optional[str] = None,
    ) -> Student:
        student = Student(
            student_id=str(uuid.uuid4()),
            name=require_non_empty(name, "Name"),
            card_id=require_non_empty(card_id, "Card ID"),
            student_class=require_non_empty(student_class, "Class"),
            parent_phone=optional_str(parent_phone),
            parent_email=optional_str(parent_email),
        )
        if self._students.get_by_card_id(student.card_id):
            raise DuplicateIdentifierError(f"Card ID {student.card_id} is already assigned to another student")

        with self._absence.roster_lock:
            self._students.create(student)
            self._absence.arm(student)
        logger.info("Student %s added with card %s", student.name, student.card_id)
        return student

    def update_student(
        self,
        student_id: str,
        *,
        name: Optional[str] = None,
        card_id: Optional[str] = None,
        student_class: Optional[str] = None,
        parent_phone: Optional[str] = None,
        parent_email: Optional[str] = None,
    ) -> Student:
        existing = self._students.get_by_id(student_id)
        if not existing:
            raise NotFoundError("Student not found")

        new_card = optional_str(card_id) or existing.card_id
        if new_card != existing.card_id:
            holder = self._students.get_by_card_id(new_card)
            if holder and holder.student_id != student_id:
                raise DuplicateIdentifierError(f"Card ID {new_card} is already assigned to another student")

        updated = Student(
            student_id=existing.student_id,
            name=optional_str(name) or existing.name,
            card_id=new_card,
            student_class=optional_str(student_class) or existing.student_class,
            parent_phone=optional_str(parent_phone) if parent_phone is not None else existing.parent_phone,
            parent_email=optional_str(parent_email) if parent_email is not None else existing.parent_email,
        )
        self._students.update(updated)
        return updated

    def remove_student(self, student_id: str) -> None:
        # Cancel before deleting so the countdown cannot fire against a vanished student.
        with self._absence.roster_lock:
            self._absence.cancel(student_id)
            if not self._students.delete_by_id(student_id):
                raise NotFoundError("Student not found")
        logger.info("Student %s removed", student_id)

    def count(self) -> int:
        return self._students.count()
