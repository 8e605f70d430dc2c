from __future__ import annotations

from enum import Enum
from typing import Optional


class NeedMet(Enum):
    """Answer to "Was your need met?". Stored as a nullable boolean."""

    YES = 'Yes'
    NO = 'No'
    UNSURE = 'Unsure'

    def to_bool(self) -> Optional[bool]:
        if self is NeedMet.YES:
            return True
        if self is NeedMet.NO:
            return False
        return None

    @classmethod
    def from_bool(cls, value: Optional[bool]) -> "NeedMet":
        if value is None:
            return cls.UNSURE
        return cls.YES if value else cls.NO

    @classmethod
    def parse(cls, label: str) -> "NeedMet":
        if isinstance(label, str):
            for choice in cls:
                if choice.value.lower() == label.strip().lower():
                    return choice
        raise ValueError(f"Invalid need-met answer: {label!r} (expected Yes, No or Unsure)")
