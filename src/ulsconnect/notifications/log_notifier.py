from __future__ import annotations

import logging
from typing import Optional

from .notifier import Notifier

logger = logging.getLogger(__name__)


class LogNotifier(Notifier):
    """Used when SMTP is not configured: records what would have been sent."""

    def activity_closed(self, *, email: str, name: str, activity_title: str, reason: str) -> bool:
        logger.info("email skipped (smtp disabled): activity closed to=%s activity=%r", email, activity_title)
        return False

    def registration_requested(self, *, email: str, name: str) -> bool:
        logger.info("email skipped (smtp disabled): registration requested by %s", email)
        return False

    def registration_approved(self, *, email: str, name: str) -> bool:
        logger.info("email skipped (smtp disabled): registration approved to=%s", email)
        return False

    def registration_rejected(self, *, email: str, name: str, notes: Optional[str]) -> bool:
        logger.info("email skipped (smtp disabled): registration rejected to=%s", email)
        return False
