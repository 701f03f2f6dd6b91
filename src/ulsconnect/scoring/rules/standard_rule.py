from __future__ import annotations

from typing import Any, Optional

from ...common.validators import parse_number
from ...core.constants import DEFAULT_POINTS_AUSENTE, DEFAULT_POINTS_JUSTIFICADA, DEFAULT_POINTS_PRESENTE
from ...core.enums import AttendanceMark
from .base import ScoringRule


class StandardScoringRule(ScoringRule):
    """Fixed points per attendance mark: presente +10, justificada +2, ausente -5."""

    def __init__(
        self,
        presente: float = DEFAULT_POINTS_PRESENTE,
        justificada: float = DEFAULT_POINTS_JUSTIFICADA,
        ausente: float = DEFAULT_POINTS_AUSENTE,
    ):
        self._points = {
            AttendanceMark.PRESENTE: presente,
            AttendanceMark.JUSTIFICADA: justificada,
            AttendanceMark.AUSENTE: ausente,
        }

    @classmethod
    def from_payload(cls, rules: Optional[dict[str, Any]]) -> "StandardScoringRule":
        """Build from a request's `reglas`; non-numeric values keep the defaults."""
        rules = rules if isinstance(rules, dict) else {}
        return cls(
            presente=parse_number(rules.get("presente"), DEFAULT_POINTS_PRESENTE),
            justificada=parse_number(rules.get("justificada"), DEFAULT_POINTS_JUSTIFICADA),
            ausente=parse_number(rules.get("ausente"), DEFAULT_POINTS_AUSENTE),
        )

    def points_for(self, mark: AttendanceMark) -> float:
        return self._points.get(mark, 0)

    def as_dict(self) -> dict[str, Any]:
        return {mark.value: points for mark, points in self._points.items()}
