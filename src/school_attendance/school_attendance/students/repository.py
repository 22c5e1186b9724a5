from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for the roster.

    `create` and `update` must raise DuplicateIdentifierError when the card ID is taken.
    """

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_card_id(self, card_id: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, student: Student) -> None:
        raise NotImplementedError

    def update(self, student: Student) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: str) -> bool:
        """Delete the student; attendance and notifications cascade."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
