from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.file_store import JsonFileStore, find_one
from .mapper import from_document, to_document
from .model import Enrollment, EnrollmentFilter, NewEnrollment
from .repository import EnrollmentRepository


def _newest_first(docs: list[dict[str, Any]]) -> list[Enrollment]:
    docs.sort(key=lambda d: d.get("creadoEn") or datetime.min, reverse=True)
    return [from_document(d) for d in docs]


class FileEnrollmentRepository(EnrollmentRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def _docs(self) -> list[dict[str, Any]]:
        return self._store.collection(mongo.ENROLLMENTS)

    def get_by_id(self, enrollment_id: str) -> Optional[Enrollment]:
        doc = find_one(self._docs(), _id=str(enrollment_id))
        return from_document(doc) if doc else None

    def get_for_user_and_activity(self, user_id: str, activity_id: str) -> Optional[Enrollment]:
        doc = find_one(self._docs(), usuario=str(user_id), actividad=str(activity_id))
        return from_document(doc) if doc else None

    def create(self, new_enrollment: NewEnrollment) -> Enrollment:
        with self._store.transaction() as data:
            docs = data.setdefault(mongo.ENROLLMENTS, [])
            if find_one(docs, usuario=new_enrollment.user_id, actividad=new_enrollment.activity_id):
                raise ConflictError("Ya estas inscrito en esta actividad")
            doc = to_document(self._store.new_id(), new_enrollment, now_utc())
            docs.append(doc)
        return from_document(doc)

    def list_by_user(self, user_id: str, statuses: Optional[Sequence[str]] = None) -> Sequence[Enrollment]:
        return _newest_first(
            [
                d
                for d in self._docs()
                if d.get("usuario") == str(user_id) and (not statuses or d.get("estado") in statuses)
            ]
        )

    def list_by_activity(self, activity_id: str, statuses: Optional[Sequence[str]] = None) -> Sequence[Enrollment]:
        return _newest_first(
            [
                d
                for d in self._docs()
                if d.get("actividad") == str(activity_id) and (not statuses or d.get("estado") in statuses)
            ]
        )

    def list_all(self, filters: EnrollmentFilter) -> Sequence[Enrollment]:
        docs = self._docs()
        if filters.status:
            docs = [d for d in docs if d.get("estado") == filters.status]
        if filters.activity_id:
            docs = [d for d in docs if d.get("actividad") == str(filters.activity_id)]
        return _newest_first(docs)

    def cancel(self, enrollment_id: str, *, reason: Optional[str], cancellable: Sequence[str]) -> Optional[Enrollment]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.ENROLLMENTS, []), _id=str(enrollment_id))
            if not doc or doc.get("estado") not in cancellable:
                return None
            doc.update({"estado": "cancelada", "motivoCancelacion": reason, "actualizadoEn": now_utc()})
        return from_document(doc)

    def close_active_for_activity(self, activity_id: str, *, active: str, terminal: str) -> Sequence[Enrollment]:
        affected = []
        with self._store.transaction() as data:
            for doc in data.setdefault(mongo.ENROLLMENTS, []):
                if doc.get("actividad") == str(activity_id) and doc.get("estado") == active:
                    affected.append(from_document(doc))
                    doc["estado"] = terminal
                    doc["actualizadoEn"] = now_utc()
        return affected

    def count_by_activity(self, activity_id: str, status: Optional[str] = None) -> int:
        return sum(
            1
            for d in self._docs()
            if d.get("actividad") == str(activity_id) and (status is None or d.get("estado") == status)
        )

    def count_by_status(self) -> dict[str, int]:
        return dict(Counter(str(d.get("estado")) for d in self._docs()))

    def delete_for_activity(self, activity_id: str) -> int:
        with self._store.transaction() as data:
            docs = data.setdefault(mongo.ENROLLMENTS, [])
            kept = [d for d in docs if d.get("actividad") != str(activity_id)]
            data[mongo.ENROLLMENTS] = kept
            return len(docs) - len(kept)
