from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
    # pymongo is chatty at DEBUG (heartbeats, server selection)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
