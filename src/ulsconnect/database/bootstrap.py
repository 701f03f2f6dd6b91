from __future__ import annotations

import logging

from pymongo import ASCENDING, DESCENDING

from . import mongo
from .mongo import MongoConnection

logger = logging.getLogger(__name__)


def ensure_indexes(conn: MongoConnection) -> list[str]:
    """Create the indexes the repositories rely on (idempotent)."""

    created = [
        conn.collection(mongo.USERS).create_index([("correoUniversitario", ASCENDING)], unique=True),
        conn.collection(mongo.USERS).create_index([("puntos", DESCENDING)]),
        conn.collection(mongo.ACTIVITIES).create_index([("estado", ASCENDING), ("fechaInicio", ASCENDING)]),
        conn.collection(mongo.ENROLLMENTS).create_index(
            [("usuario", ASCENDING), ("actividad", ASCENDING)],
            unique=True,
        ),
        conn.collection(mongo.ENROLLMENTS).create_index([("actividad", ASCENDING), ("estado", ASCENDING)]),
        conn.collection(mongo.ATTENDANCE).create_index([("actividad", ASCENDING)], unique=True),
        conn.collection(mongo.IMPACT_REPORTS).create_index([("idActividad", ASCENDING)], unique=True),
        conn.collection(mongo.REGISTRATION_REQUESTS).create_index(
            [("correoUniversitario", ASCENDING)],
            unique=True,
        ),
    ]
    logger.info("Mongo indexes ready: %s", ", ".join(created))
    return created


def list_collections(conn: MongoConnection) -> list[str]:
    return sorted(conn.db.list_collection_names())
