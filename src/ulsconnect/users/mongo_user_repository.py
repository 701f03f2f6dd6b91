from __future__ import annotations

import re
from typing import Any, Optional, Sequence

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.mongo import MongoConnection
from .mapper import from_document, point_entry_to_document, to_document
from .model import NewUser, PointEntry, User, UserQuery
from .repository import UserRepository


class MongoUserRepository(UserRepository):
    def __init__(self, conn: MongoConnection):
        self._users = conn.collection(mongo.USERS)

    def get_by_id(self, user_id: str) -> Optional[User]:
        doc = self._users.find_one({"_id": str(user_id)})
        return from_document(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[User]:
        doc = self._users.find_one({"correoUniversitario": email})
        return from_document(doc) if doc else None

    def get_many(self, user_ids: Sequence[str]) -> dict[str, User]:
        ids = list({str(u) for u in user_ids if u})
        if not ids:
            return {}
        return {str(doc["_id"]): from_document(doc) for doc in self._users.find({"_id": {"$in": ids}})}

    def create(self, new_user: NewUser) -> User:
        doc = to_document(mongo.new_id(), new_user, now_utc())
        try:
            self._users.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Usuario ya registrado")
        return from_document(doc)

    def update_fields(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        doc = self._users.find_one_and_update(
            {"_id": str(user_id)},
            {"$set": {**fields, "actualizadoEn": now_utc()}},
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None

    def search(self, query: UserQuery) -> tuple[Sequence[User], int]:
        filters: dict[str, Any] = {}
        if query.search:
            pattern = {"$regex": re.escape(query.search), "$options": "i"}
            filters["$or"] = [{"nombre": pattern}, {"correoUniversitario": pattern}]
        if query.role:
            filters["rol"] = query.role.value
        if query.blocked is True:
            filters["bloqueado"] = True
        elif query.blocked is False:
            filters["bloqueado"] = {"$ne": True}

        total = self._users.count_documents(filters)
        cursor = (
            self._users.find(filters)
            .sort("creadoEn", DESCENDING)
            .skip(int(query.skip))
            .limit(int(query.limit))
        )
        return [from_document(doc) for doc in cursor], total

    def list_by_role(self, role: Role) -> Sequence[User]:
        return [from_document(doc) for doc in self._users.find({"rol": role.value}).sort("nombre", 1)]

    def apply_points(
        self,
        user_id: str,
        entry: PointEntry,
        *,
        dedupe_by_activity: bool,
        history_limit: int,
    ) -> tuple[Optional[User], bool]:
        filters: dict[str, Any] = {"_id": str(user_id)}
        if dedupe_by_activity and entry.activity_id:
            # matches only users whose history has no element for this activity
            filters["historialPuntos.actividad"] = {"$ne": entry.activity_id}

        doc = self._users.find_one_and_update(
            filters,
            {
                "$inc": {"puntos": entry.delta},
                "$push": {
                    "historialPuntos": {
                        "$each": [point_entry_to_document(entry)],
                        "$position": 0,
                        "$slice": int(history_limit),
                    }
                },
                "$set": {"actualizadoEn": now_utc()},
            },
            return_document=ReturnDocument.AFTER,
        )
        if doc:
            return from_document(doc), True
        return self.get_by_id(user_id), False

    def top_by_points(self, limit: int) -> Sequence[User]:
        cursor = self._users.find({"bloqueado": {"$ne": True}}).sort([("puntos", DESCENDING), ("nombre", 1)]).limit(int(limit))
        return [from_document(doc) for doc in cursor]
