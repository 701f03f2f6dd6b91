from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceList


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: str) -> Optional[AttendanceList]:
        raise NotImplementedError

    def get_by_activity(self, activity_id: str) -> Optional[AttendanceList]:
        raise NotImplementedError

    def create_if_absent(
        self,
        activity_id: str,
        entries: Sequence[AttendanceEntry],
        recorded_by: str,
    ) -> tuple[AttendanceList, bool]:
        """Insert a list for the activity unless one exists.

        Returns (list, created); an existing list is returned untouched.
        """

        raise NotImplementedError

    def replace_entries(
        self,
        attendance_id: str,
        entries: Sequence[AttendanceEntry],
        recorded_by: str,
    ) -> Optional[AttendanceList]:
        raise NotImplementedError

    def list_all(self, activity_id: Optional[str] = None) -> Sequence[AttendanceList]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def delete_for_activity(self, activity_id: str) -> int:
        raise NotImplementedError
