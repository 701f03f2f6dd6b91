from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RegistrationStatus
from .model import NewRegistrationRequest, RegistrationRequest


class RegistrationRepository(Protocol):
    def get_by_id(self, request_id: str) -> Optional[RegistrationRequest]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[RegistrationRequest]:
        raise NotImplementedError

    def create(self, new_request: NewRegistrationRequest) -> RegistrationRequest:
        """Insert; raises ConflictError when a request for the e-mail exists."""

        raise NotImplementedError

    def list_by_status(self, status: RegistrationStatus) -> Sequence[RegistrationRequest]:
        """Oldest first."""

        raise NotImplementedError

    def decide(
        self,
        request_id: str,
        *,
        status: RegistrationStatus,
        reviewer_id: Optional[str],
        notes: str = "",
    ) -> Optional[RegistrationRequest]:
        """Move a pending request to `status`; None when it is not pending (or missing)."""

        raise NotImplementedError

    def reopen(self, request_id: str, *, status: RegistrationStatus) -> Optional[RegistrationRequest]:
        """Put a request decided as `status` back to pending and clear the review."""

        raise NotImplementedError
