from __future__ import annotations

from typing import Optional, Protocol


class Notifier(Protocol):
    """Outbound user notifications.

    Every method returns True when the message was handed to the transport.
    Implementations log delivery failures and never raise.
    """

    def activity_closed(self, *, email: str, name: str, activity_title: str, reason: str) -> bool:
        raise NotImplementedError

    def registration_requested(self, *, email: str, name: str) -> bool:
        raise NotImplementedError

    def registration_approved(self, *, email: str, name: str) -> bool:
        raise NotImplementedError

    def registration_rejected(self, *, email: str, name: str, notes: Optional[str]) -> bool:
        raise NotImplementedError
