from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Enrollment, EnrollmentFilter, NewEnrollment


class EnrollmentRepository(Protocol):
    def get_by_id(self, enrollment_id: str) -> Optional[Enrollment]:
        raise NotImplementedError

    def get_for_user_and_activity(self, user_id: str, activity_id: str) -> Optional[Enrollment]:
        raise NotImplementedError

    def create(self, new_enrollment: NewEnrollment) -> Enrollment:
        """Insert; raises ConflictError when the (user, activity) pair exists."""

        raise NotImplementedError

    def list_by_user(self, user_id: str, statuses: Optional[Sequence[str]] = None) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_by_activity(self, activity_id: str, statuses: Optional[Sequence[str]] = None) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_all(self, filters: EnrollmentFilter) -> Sequence[Enrollment]:
        raise NotImplementedError

    def cancel(self, enrollment_id: str, *, reason: Optional[str], cancellable: Sequence[str]) -> Optional[Enrollment]:
        """Set `cancelada` only if the current status is in `cancellable`; None otherwise."""

        raise NotImplementedError

    def close_active_for_activity(self, activity_id: str, *, active: str, terminal: str) -> Sequence[Enrollment]:
        """Move every `active` enrollment of the activity to `terminal`.

        Returns the enrollments that transitioned (as they were before the write).
        """

        raise NotImplementedError

    def count_by_activity(self, activity_id: str, status: Optional[str] = None) -> int:
        raise NotImplementedError

    def count_by_status(self) -> dict[str, int]:
        raise NotImplementedError

    def delete_for_activity(self, activity_id: str) -> int:
        raise NotImplementedError
