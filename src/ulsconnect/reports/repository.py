from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ImpactReport, NewImpactReport


class ImpactReportRepository(Protocol):
    def get_by_activity(self, activity_id: str) -> Optional[ImpactReport]:
        raise NotImplementedError

    def create(self, new_report: NewImpactReport) -> ImpactReport:
        """Insert; raises ConflictError when the activity already has a report."""

        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[ImpactReport]:
        raise NotImplementedError
