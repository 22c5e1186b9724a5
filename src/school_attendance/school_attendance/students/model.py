from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a tracked student identified by a unique badge (card)."""

    student_id: str
    name: str
    card_id: str
    student_class: Optional[str] = None
    parent_phone: Optional[str] = None
    parent_email: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "card_id": self.card_id,
            "class": self.student_class,
            "parent_phone": self.parent_phone,
            "parent_email": self.parent_email,
        }
