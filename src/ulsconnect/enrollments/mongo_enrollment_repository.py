from __future__ import annotations

from typing import Any, Optional, Sequence

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_utc
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.mongo import MongoConnection
from .mapper import from_document, to_document
from .model import Enrollment, EnrollmentFilter, NewEnrollment
from .repository import EnrollmentRepository


def _status_filter(statuses: Optional[Sequence[str]]) -> dict[str, Any]:
    return {"estado": {"$in": list(statuses)}} if statuses else {}


class MongoEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn: MongoConnection):
        self._enrollments = conn.collection(mongo.ENROLLMENTS)

    def get_by_id(self, enrollment_id: str) -> Optional[Enrollment]:
        doc = self._enrollments.find_one({"_id": str(enrollment_id)})
        return from_document(doc) if doc else None

    def get_for_user_and_activity(self, user_id: str, activity_id: str) -> Optional[Enrollment]:
        doc = self._enrollments.find_one({"usuario": str(user_id), "actividad": str(activity_id)})
        return from_document(doc) if doc else None

    def create(self, new_enrollment: NewEnrollment) -> Enrollment:
        doc = to_document(mongo.new_id(), new_enrollment, now_utc())
        try:
            self._enrollments.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Ya estas inscrito en esta actividad")
        return from_document(doc)

    def list_by_user(self, user_id: str, statuses: Optional[Sequence[str]] = None) -> Sequence[Enrollment]:
        query = {"usuario": str(user_id), **_status_filter(statuses)}
        return [from_document(d) for d in self._enrollments.find(query).sort("creadoEn", DESCENDING)]

    def list_by_activity(self, activity_id: str, statuses: Optional[Sequence[str]] = None) -> Sequence[Enrollment]:
        query = {"actividad": str(activity_id), **_status_filter(statuses)}
        return [from_document(d) for d in self._enrollments.find(query).sort("creadoEn", DESCENDING)]

    def list_all(self, filters: EnrollmentFilter) -> Sequence[Enrollment]:
        query: dict[str, Any] = {}
        if filters.status:
            query["estado"] = filters.status
        if filters.activity_id:
            query["actividad"] = str(filters.activity_id)
        return [from_document(d) for d in self._enrollments.find(query).sort("creadoEn", DESCENDING)]

    def cancel(self, enrollment_id: str, *, reason: Optional[str], cancellable: Sequence[str]) -> Optional[Enrollment]:
        doc = self._enrollments.find_one_and_update(
            {"_id": str(enrollment_id), "estado": {"$in": list(cancellable)}},
            {"$set": {"estado": "cancelada", "motivoCancelacion": reason, "actualizadoEn": now_utc()}},
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None

    def close_active_for_activity(self, activity_id: str, *, active: str, terminal: str) -> Sequence[Enrollment]:
        query = {"actividad": str(activity_id), "estado": active}
        affected = [from_document(d) for d in self._enrollments.find(query)]
        if affected:
            self._enrollments.update_many(
                {"_id": {"$in": [e.enrollment_id for e in affected]}, "estado": active},
                {"$set": {"estado": terminal, "actualizadoEn": now_utc()}},
            )
        return affected

    def count_by_activity(self, activity_id: str, status: Optional[str] = None) -> int:
        query: dict[str, Any] = {"actividad": str(activity_id)}
        if status:
            query["estado"] = status
        return self._enrollments.count_documents(query)

    def count_by_status(self) -> dict[str, int]:
        rows = self._enrollments.aggregate([{"$group": {"_id": "$estado", "total": {"$sum": 1}}}])
        return {str(row["_id"]): int(row["total"]) for row in rows}

    def delete_for_activity(self, activity_id: str) -> int:
        return self._enrollments.delete_many({"actividad": str(activity_id)}).deleted_count
