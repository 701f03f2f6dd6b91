from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import RegistrationStatus


@dataclass(frozen=True)
class RegistrationRequest:
    """A pending account request; becomes a User once approved."""

    request_id: str
    email: str
    password_hash: str
    name: str
    status: RegistrationStatus = RegistrationStatus.PENDING
    phone: Optional[str] = None
    career: str = ""
    interests: tuple[str, ...] = ()
    comuna: str = ""
    address: str = ""
    age: Optional[int] = None
    user_status: str = ""
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewRegistrationRequest:
    email: str
    password_hash: str
    name: str
    phone: Optional[str] = None
    career: str = ""
    interests: tuple[str, ...] = field(default_factory=tuple)
    comuna: str = ""
    address: str = ""
    age: Optional[int] = None
    user_status: str = ""
