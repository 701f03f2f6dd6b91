from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class PointEntry:
    """One score adjustment, newest first in `User.point_history`."""

    delta: float
    reason: Optional[str]
    activity_id: Optional[str]
    recorded_by: Optional[str]
    recorded_at: datetime


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no database access code).
    """

    user_id: str
    email: str
    password_hash: str
    name: str
    role: Role = Role.ESTUDIANTE
    blocked: bool = False
    points: float = 0
    point_history: tuple[PointEntry, ...] = ()
    phone: Optional[str] = None
    career: str = ""
    interests: tuple[str, ...] = ()
    comuna: str = ""
    address: str = ""
    age: Optional[int] = None
    status: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewUser:
    email: str
    password_hash: str
    name: str
    role: Role = Role.ESTUDIANTE
    phone: Optional[str] = None
    career: str = ""
    interests: tuple[str, ...] = field(default_factory=tuple)
    comuna: str = ""
    address: str = ""
    age: Optional[int] = None
    status: str = ""


@dataclass(frozen=True)
class UserQuery:
    search: str = ""
    role: Optional[Role] = None
    blocked: Optional[bool] = None
    limit: int = 50
    skip: int = 0
