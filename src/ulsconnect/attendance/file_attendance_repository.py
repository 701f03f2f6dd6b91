from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..database import mongo
from ..database.file_store import JsonFileStore, find_one
from .mapper import entries_to_document, from_document, to_document
from .model import AttendanceEntry, AttendanceList
from .repository import AttendanceRepository


class FileAttendanceRepository(AttendanceRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def get_by_id(self, attendance_id: str) -> Optional[AttendanceList]:
        doc = find_one(self._store.collection(mongo.ATTENDANCE), _id=str(attendance_id))
        return from_document(doc) if doc else None

    def get_by_activity(self, activity_id: str) -> Optional[AttendanceList]:
        doc = find_one(self._store.collection(mongo.ATTENDANCE), actividad=str(activity_id))
        return from_document(doc) if doc else None

    def create_if_absent(
        self,
        activity_id: str,
        entries: Sequence[AttendanceEntry],
        recorded_by: str,
    ) -> tuple[AttendanceList, bool]:
        with self._store.transaction() as data:
            docs = data.setdefault(mongo.ATTENDANCE, [])
            existing = find_one(docs, actividad=str(activity_id))
            if existing:
                return from_document(existing), False
            doc = to_document(self._store.new_id(), str(activity_id), entries, recorded_by, now_utc())
            docs.append(doc)
        return from_document(doc), True

    def replace_entries(
        self,
        attendance_id: str,
        entries: Sequence[AttendanceEntry],
        recorded_by: str,
    ) -> Optional[AttendanceList]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.ATTENDANCE, []), _id=str(attendance_id))
            if not doc:
                return None
            now = now_utc()
            doc.update(
                {
                    "inscripciones": entries_to_document(entries),
                    "registradoPor": recorded_by,
                    "fecha": now,
                    "updatedAt": now,
                }
            )
        return from_document(doc)

    def list_all(self, activity_id: Optional[str] = None) -> Sequence[AttendanceList]:
        docs = self._store.collection(mongo.ATTENDANCE)
        if activity_id:
            docs = [d for d in docs if d.get("actividad") == str(activity_id)]
        docs.sort(key=lambda d: d.get("fecha") or datetime.min, reverse=True)
        return [from_document(d) for d in docs]

    def count(self) -> int:
        return len(self._store.collection(mongo.ATTENDANCE))

    def delete_for_activity(self, activity_id: str) -> int:
        with self._store.transaction() as data:
            docs = data.setdefault(mongo.ATTENDANCE, [])
            kept = [d for d in docs if d.get("actividad") != str(activity_id)]
            data[mongo.ATTENDANCE] = kept
            return len(docs) - len(kept)
