from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import ActivityState
from ..database import mongo
from ..database.file_store import JsonFileStore, find_one
from .mapper import from_document, to_document
from .model import Activity, ActivityFilter, NewActivity
from .repository import ActivityRepository


class FileActivityRepository(ActivityRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def create(self, new_activity: NewActivity) -> Activity:
        with self._store.transaction() as data:
            doc = to_document(self._store.new_id(), new_activity, now_utc())
            data.setdefault(mongo.ACTIVITIES, []).append(doc)
        return from_document(doc)

    def get_by_id(self, activity_id: str) -> Optional[Activity]:
        doc = find_one(self._store.collection(mongo.ACTIVITIES), _id=str(activity_id))
        return from_document(doc) if doc else None

    def get_many(self, activity_ids: Sequence[str]) -> dict[str, Activity]:
        wanted = {str(a) for a in activity_ids if a}
        return {
            str(doc["_id"]): from_document(doc)
            for doc in self._store.collection(mongo.ACTIVITIES)
            if str(doc["_id"]) in wanted
        }

    def list(self, filters: ActivityFilter) -> Sequence[Activity]:
        out = []
        for doc in self._store.collection(mongo.ACTIVITIES):
            if filters.title and filters.title.lower() not in (doc.get("titulo") or "").lower():
                continue
            if filters.type and filters.type.lower() not in (doc.get("tipo") or "").lower():
                continue
            if filters.area and doc.get("area") != filters.area:
                continue
            if filters.state and doc.get("estado") != filters.state:
                continue
            out.append(doc)
        out.sort(key=lambda d: d.get("fechaInicio") or datetime.max)
        return [from_document(doc) for doc in out]

    def update(self, activity_id: str, fields: dict[str, Any]) -> Optional[Activity]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.ACTIVITIES, []), _id=str(activity_id))
            if not doc:
                return None
            doc.update(fields)
            doc["actualizadoEn"] = now_utc()
        return from_document(doc)

    def delete(self, activity_id: str) -> bool:
        with self._store.transaction() as data:
            docs = data.setdefault(mongo.ACTIVITIES, [])
            kept = [d for d in docs if str(d["_id"]) != str(activity_id)]
            data[mongo.ACTIVITIES] = kept
            return len(kept) != len(docs)

    def reserve_seat(self, activity_id: str) -> Optional[Activity]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.ACTIVITIES, []), _id=str(activity_id))
            if not doc or doc.get("estado") != ActivityState.ACTIVA.value:
                return None
            capacity = doc.get("capacidad")
            if capacity is not None:
                if capacity <= 0:
                    return None
                doc["capacidad"] = capacity - 1
            doc["actualizadoEn"] = now_utc()
        return from_document(doc)

    def release_seat(self, activity_id: str) -> Optional[Activity]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.ACTIVITIES, []), _id=str(activity_id))
            if not doc:
                return None
            if doc.get("capacidad") is not None:
                doc["capacidad"] = doc["capacidad"] + 1
            doc["actualizadoEn"] = now_utc()
        return from_document(doc)

    def close(self, activity_id: str, *, reason: str, closed_at: datetime) -> Optional[Activity]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.ACTIVITIES, []), _id=str(activity_id))
            if not doc or doc.get("estado") == ActivityState.CLOSED.value:
                return None
            doc.update(
                {
                    "estado": ActivityState.CLOSED.value,
                    "fechaCierre": closed_at,
                    "motivoCierre": reason,
                    "actualizadoEn": now_utc(),
                }
            )
        return from_document(doc)
