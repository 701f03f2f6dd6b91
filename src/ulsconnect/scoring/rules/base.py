from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ...core.enums import AttendanceMark


class ScoringRule(ABC):
    """Rule interface (Strategy Pattern for attendance scoring)."""

    @abstractmethod
    def points_for(self, mark: AttendanceMark) -> float:
        raise NotImplementedError

    @abstractmethod
    def as_dict(self) -> dict[str, Any]:
        raise NotImplementedError
