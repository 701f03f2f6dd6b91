from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ImpactMetrics:
    invited: int
    confirmed: int
    attended: int
    total_hours: float
    beneficiaries: Optional[float] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ImpactReport:
    """One impact report per activity (`reportesImpacto`)."""

    report_id: str
    activity_id: str
    metrics: ImpactMetrics
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewImpactReport:
    activity_id: str
    metrics: ImpactMetrics
    created_by: str
