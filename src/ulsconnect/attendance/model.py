from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceMark


@dataclass(frozen=True)
class AttendanceEntry:
    user_id: str
    mark: AttendanceMark = AttendanceMark.AUSENTE


@dataclass(frozen=True)
class AttendanceList:
    """Roster of one activity with a mark per enrolled user."""

    attendance_id: str
    activity_id: str
    entries: tuple[AttendanceEntry, ...]
    recorded_by: Optional[str]
    recorded_at: Optional[datetime]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def user_ids(self) -> set[str]:
        return {e.user_id for e in self.entries}
