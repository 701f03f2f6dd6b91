from __future__ import annotations

from typing import Optional, Sequence

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_utc
from ..database import mongo
from ..database.mongo import MongoConnection
from .mapper import entries_to_document, from_document, to_document
from .model import AttendanceEntry, AttendanceList
from .repository import AttendanceRepository


class MongoAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: MongoConnection):
        self._attendance = conn.collection(mongo.ATTENDANCE)

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceList]:
        doc = self._attendance.find_one({"_id": str(attendance_id)})
        return from_document(doc) if doc else None

    def get_by_activity(self, activity_id: str) -> Optional[AttendanceList]:
        doc = self._attendance.find_one({"actividad": str(activity_id)})
        return from_document(doc) if doc else None

    def create_if_absent(
        self,
        activity_id: str,
        entries: Sequence[AttendanceEntry],
        recorded_by: str,
    ) -> tuple[AttendanceList, bool]:
        doc = to_document(mongo.new_id(), str(activity_id), entries, recorded_by, now_utc())
        try:
            stored = self._attendance.find_one_and_update(
                {"actividad": str(activity_id)},
                {"$setOnInsert": doc},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # concurrent upsert on the unique index: the other insert won
            stored = self._attendance.find_one({"actividad": str(activity_id)})
        return from_document(stored), stored["_id"] == doc["_id"]

    def replace_entries(
        self,
        attendance_id: str,
        entries: Sequence[AttendanceEntry],
        recorded_by: str,
    ) -> Optional[AttendanceList]:
        now = now_utc()
        doc = self._attendance.find_one_and_update(
            {"_id": str(attendance_id)},
            {
                "$set": {
                    "inscripciones": entries_to_document(entries),
                    "registradoPor": recorded_by,
                    "fecha": now,
                    "updatedAt": now,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None

    def list_all(self, activity_id: Optional[str] = None) -> Sequence[AttendanceList]:
        query = {"actividad": str(activity_id)} if activity_id else {}
        return [from_document(d) for d in self._attendance.find(query).sort("fecha", DESCENDING)]

    def count(self) -> int:
        return self._attendance.count_documents({})

    def delete_for_activity(self, activity_id: str) -> int:
        return self._attendance.delete_many({"actividad": str(activity_id)}).deleted_count
