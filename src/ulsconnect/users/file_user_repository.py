from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.file_store import JsonFileStore, find_one
from .mapper import from_document, point_entry_to_document, to_document
from .model import NewUser, PointEntry, User, UserQuery
from .repository import UserRepository


class FileUserRepository(UserRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def get_by_id(self, user_id: str) -> Optional[User]:
        doc = find_one(self._store.collection(mongo.USERS), _id=str(user_id))
        return from_document(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[User]:
        doc = find_one(self._store.collection(mongo.USERS), correoUniversitario=email)
        return from_document(doc) if doc else None

    def get_many(self, user_ids: Sequence[str]) -> dict[str, User]:
        wanted = {str(u) for u in user_ids if u}
        return {
            str(doc["_id"]): from_document(doc)
            for doc in self._store.collection(mongo.USERS)
            if str(doc["_id"]) in wanted
        }

    def create(self, new_user: NewUser) -> User:
        with self._store.transaction() as data:
            users = data.setdefault(mongo.USERS, [])
            if find_one(users, correoUniversitario=new_user.email):
                raise ConflictError("Usuario ya registrado")
            doc = to_document(self._store.new_id(), new_user, now_utc())
            users.append(doc)
        return from_document(doc)

    def update_fields(self, user_id: str, fields: dict[str, Any]) -> Optional[User]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.USERS, []), _id=str(user_id))
            if not doc:
                return None
            doc.update(fields)
            doc["actualizadoEn"] = now_utc()
        return from_document(doc)

    def search(self, query: UserQuery) -> tuple[Sequence[User], int]:
        needle = query.search.lower()
        matches = []
        for doc in self._store.collection(mongo.USERS):
            if needle and needle not in (doc.get("nombre") or "").lower() and needle not in (
                doc.get("correoUniversitario") or ""
            ).lower():
                continue
            if query.role and doc.get("rol") != query.role.value:
                continue
            if query.blocked is not None and bool(doc.get("bloqueado")) != query.blocked:
                continue
            matches.append(doc)

        matches.sort(key=lambda d: d.get("creadoEn") or datetime.min, reverse=True)
        page = matches[int(query.skip): int(query.skip) + int(query.limit)]
        return [from_document(doc) for doc in page], len(matches)

    def list_by_role(self, role: Role) -> Sequence[User]:
        docs = [d for d in self._store.collection(mongo.USERS) if d.get("rol") == role.value]
        docs.sort(key=lambda d: d.get("nombre") or "")
        return [from_document(doc) for doc in docs]

    def apply_points(
        self,
        user_id: str,
        entry: PointEntry,
        *,
        dedupe_by_activity: bool,
        history_limit: int,
    ) -> tuple[Optional[User], bool]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.USERS, []), _id=str(user_id))
            if not doc:
                return None, False

            history = list(doc.get("historialPuntos") or [])
            if dedupe_by_activity and entry.activity_id:
                if any(h.get("actividad") == entry.activity_id for h in history):
                    return from_document(doc), False

            doc["puntos"] = (doc.get("puntos") or 0) + entry.delta
            doc["historialPuntos"] = [point_entry_to_document(entry), *history][: int(history_limit)]
            doc["actualizadoEn"] = now_utc()
        return from_document(doc), True

    def top_by_points(self, limit: int) -> Sequence[User]:
        docs = [d for d in self._store.collection(mongo.USERS) if not d.get("bloqueado")]
        docs.sort(key=lambda d: (-(d.get("puntos") or 0), d.get("nombre") or ""))
        return [from_document(doc) for doc in docs[: int(limit)]]
