from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bson import ObjectId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

USERS = "usuarios"
ACTIVITIES = "actividades"
ENROLLMENTS = "inscripciones"
ATTENDANCE = "registrosAsistencia"
IMPACT_REPORTS = "reportesImpacto"
REGISTRATION_REQUESTS = "registrationRequests"


@dataclass(frozen=True)
class MongoConfig:
    uri: str
    database: str
    server_selection_timeout_ms: int = 5000


class MongoConnection:
    """Owns the MongoClient for the lifetime of the app.

    Note: Built once in the container and passed to every Mongo repository;
    MongoClient connects lazily so constructing it does not hit the network.
    """

    def __init__(self, config: MongoConfig, client: Optional[MongoClient] = None):
        self._config = config
        self._client = client or MongoClient(
            config.uri,
            serverSelectionTimeoutMS=int(config.server_selection_timeout_ms),
        )

    @property
    def db(self) -> Database:
        return self._client[self._config.database]

    def collection(self, name: str) -> Collection:
        return self.db[name]

    def ping(self) -> bool:
        self._client.admin.command("ping")
        return True

    def close(self) -> None:
        self._client.close()


def new_id() -> str:
    # ids are stored as hex strings in both backends so references compare equal
    return str(ObjectId())
