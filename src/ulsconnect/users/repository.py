from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewUser, PointEntry, User, UserQuery


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete store.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_many(self, user_ids: Sequence[str]) -> dict[str, User]:
        raise NotImplementedError

    def create(self, new_user: NewUser) -> User:
        """Insert a user; raises ConflictError when the e-mail is taken."""

        raise NotImplementedError

    def update_fields(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        """Set document fields (already in stored shape); None if the user does not exist."""

        raise NotImplementedError

    def search(self, query: UserQuery) -> tuple[Sequence[User], int]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def apply_points(
        self,
        user_id: str,
        entry: PointEntry,
        *,
        dedupe_by_activity: bool,
        history_limit: int,
    ) -> tuple[Optional[User], bool]:
        """Add `entry.delta` and prepend `entry` in one write.

        With `dedupe_by_activity` the write is skipped when the stored history
        already references `entry.activity_id`. Returns (user, applied).
        """

        raise NotImplementedError

    def top_by_points(self, limit: int) -> Sequence[User]:
        raise NotImplementedError
