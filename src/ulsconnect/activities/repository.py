from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from .model import Activity, ActivityFilter, NewActivity


class ActivityRepository(Protocol):
    def create(self, new_activity: NewActivity) -> Activity:
        raise NotImplementedError

    def get_by_id(self, activity_id: str) -> Optional[Activity]:
        raise NotImplementedError

    def get_many(self, activity_ids: Sequence[str]) -> dict[str, Activity]:
        raise NotImplementedError

    def list(self, filters: ActivityFilter) -> Sequence[Activity]:
        """Sorted by start date ascending; title/type match case-insensitively."""

        raise NotImplementedError

    def update(self, activity_id: str, fields: dict[str, Any]) -> Optional[Activity]:
        raise NotImplementedError

    def delete(self, activity_id: str) -> bool:
        raise NotImplementedError

    def reserve_seat(self, activity_id: str) -> Optional[Activity]:
        """Single conditional write: only an `activa` activity whose capacity is
        untracked or > 0 matches; a tracked capacity is decremented by one.

        Returns the updated activity, or None when nothing matched.
        """

        raise NotImplementedError

    def release_seat(self, activity_id: str) -> Optional[Activity]:
        """Give back one seat when capacity is tracked."""

        raise NotImplementedError

    def close(self, activity_id: str, *, reason: str, closed_at: datetime) -> Optional[Activity]:
        """Transition to `closed` unless already closed; None when nothing matched."""

        raise NotImplementedError
