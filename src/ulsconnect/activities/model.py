from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Location:
    comuna: str
    place: str
    address: str = ""
    region: str = "Región de Coquimbo"
    lng: float = 0


@dataclass(frozen=True)
class Activity:
    """Domain entity: a volunteer activity (event).

    `capacity` is None when seats are not tracked; otherwise it holds the
    seats still available and moves with enrollments/cancellations.
    """

    activity_id: str
    title: str
    description: str
    area: str
    type: str
    start_at: datetime
    end_at: datetime
    location: Location
    capacity: Optional[int]
    state: str
    created_by: str
    closed_at: Optional[datetime] = None
    close_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewActivity:
    title: str
    description: str
    area: str
    type: str
    start_at: datetime
    end_at: datetime
    location: Location
    capacity: Optional[int]
    state: str
    created_by: str


@dataclass(frozen=True)
class ActivityFilter:
    title: Optional[str] = None
    type: Optional[str] = None
    area: Optional[str] = None
    state: Optional[str] = None
