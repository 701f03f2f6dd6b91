from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class Enrollment:
    """Link between a user and an activity (`inscripciones`)."""

    enrollment_id: str
    user_id: str
    activity_id: str
    status: str
    cancel_reason: Optional[str] = None
    answers: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewEnrollment:
    user_id: str
    activity_id: str
    status: str
    answers: Optional[Any] = None


@dataclass(frozen=True)
class EnrollmentFilter:
    status: Optional[str] = None
    activity_id: Optional[str] = None
