from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..common.validators import parse_number
from ..core.constants import DEFAULT_LEADERBOARD_LIMIT, DEFAULT_SCORE_HISTORY_LIMIT, POINT_HISTORY_LIMIT
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import PointEntry, User
from ..users.repository import UserRepository
from .rules.base import ScoringRule
from .rules.standard_rule import StandardScoringRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreResult:
    user: Optional[User]
    applied: bool


@dataclass(frozen=True)
class ActivityScoring:
    rules: dict[str, Any]
    results: list[dict[str, Any]]

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def applied(self) -> int:
        return sum(1 for r in self.results if r["aplicado"])


@dataclass(frozen=True)
class ScoreSummary:
    user: User
    history: Sequence[PointEntry]


class ScoringService:
    def __init__(self, users: UserRepository, attendance: AttendanceRepository):
        self._users = users
        self._attendance = attendance

    def adjust_score(
        self,
        user_id: str,
        delta: Any,
        *,
        reason: Optional[str] = None,
        activity_id: Optional[str] = None,
        actor_id: Optional[str] = None,
        dedupe_by_activity: bool = False,
    ) -> ScoreResult:
        """Add `delta` to the user's points and prepend a history entry.

        With `dedupe_by_activity` the write only happens if the stored history
        has no entry for `activity_id`; the check and the write are one update.
        """
        if not user_id:
            raise ValidationError("usuario requerido")
        amount = parse_number(delta, None)
        if amount is None:
            raise ValidationError("delta debe ser numerico")

        entry = PointEntry(
            delta=amount,
            reason=reason,
            activity_id=str(activity_id) if activity_id else None,
            recorded_by=str(actor_id) if actor_id else None,
            recorded_at=now_utc(),
        )
        user, applied = self._users.apply_points(
            str(user_id),
            entry,
            dedupe_by_activity=dedupe_by_activity,
            history_limit=POINT_HISTORY_LIMIT,
        )
        return ScoreResult(user=user, applied=applied)

    def score_activity(
        self,
        activity_id: str,
        *,
        actor_id: Optional[str] = None,
        rule: Optional[ScoringRule] = None,
    ) -> ActivityScoring:
        rule = rule or StandardScoringRule()
        attendance = self._attendance.get_by_activity(activity_id)
        if not attendance:
            raise NotFoundError("No hay registro de asistencia para esta actividad")

        results = []
        for entry in attendance.entries:
            points = rule.points_for(entry.mark)
            if not points:
                results.append(
                    {
                        "usuario": entry.user_id,
                        "asistencia": entry.mark.value,
                        "puntosAplicados": 0,
                        "aplicado": False,
                        "motivo": "Puntaje configurado en 0 o no numerico",
                    }
                )
                continue

            result = self.adjust_score(
                entry.user_id,
                points,
                reason=f"Asistencia en actividad {activity_id}",
                activity_id=activity_id,
                actor_id=actor_id,
                dedupe_by_activity=True,
            )
            results.append(
                {
                    "usuario": entry.user_id,
                    "asistencia": entry.mark.value,
                    "puntosAplicados": points if result.applied else 0,
                    "aplicado": result.applied,
                    "encontrado": result.user is not None,
                }
            )

        scoring = ActivityScoring(rules=rule.as_dict(), results=results)
        logger.info(
            "activity scored id=%s processed=%d applied=%d", activity_id, scoring.processed, scoring.applied
        )
        return scoring

    def get_score(self, user_id: str, limit: int = DEFAULT_SCORE_HISTORY_LIMIT) -> ScoreSummary:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Usuario no encontrado")
        return ScoreSummary(user=user, history=user.point_history[: max(int(limit), 0)])

    def leaderboard(self, limit: int = DEFAULT_LEADERBOARD_LIMIT) -> Sequence[User]:
        return self._users.top_by_points(limit)
