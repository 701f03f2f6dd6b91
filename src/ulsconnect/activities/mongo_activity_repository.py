from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional, Sequence

from pymongo import ASCENDING, ReturnDocument

from ..common.datetime_utils import now_utc
from ..core.enums import ActivityState
from ..database import mongo
from ..database.mongo import MongoConnection
from .mapper import from_document, to_document
from .model import Activity, ActivityFilter, NewActivity
from .repository import ActivityRepository


def _contains(text: str) -> dict[str, str]:
    return {"$regex": re.escape(text), "$options": "i"}


class MongoActivityRepository(ActivityRepository):
    def __init__(self, conn: MongoConnection):
        self._activities = conn.collection(mongo.ACTIVITIES)

    def create(self, new_activity: NewActivity) -> Activity:
        doc = to_document(mongo.new_id(), new_activity, now_utc())
        self._activities.insert_one(doc)
        return from_document(doc)

    def get_by_id(self, activity_id: str) -> Optional[Activity]:
        doc = self._activities.find_one({"_id": str(activity_id)})
        return from_document(doc) if doc else None

    def get_many(self, activity_ids: Sequence[str]) -> dict[str, Activity]:
        ids = list({str(a) for a in activity_ids if a})
        if not ids:
            return {}
        return {str(doc["_id"]): from_document(doc) for doc in self._activities.find({"_id": {"$in": ids}})}

    def list(self, filters: ActivityFilter) -> Sequence[Activity]:
        query: dict[str, Any] = {}
        if filters.title:
            query["titulo"] = _contains(filters.title)
        if filters.type:
            query["tipo"] = _contains(filters.type)
        if filters.area:
            query["area"] = filters.area
        if filters.state:
            query["estado"] = filters.state
        return [from_document(doc) for doc in self._activities.find(query).sort("fechaInicio", ASCENDING)]

    def update(self, activity_id: str, fields: dict[str, Any]) -> Optional[Activity]:
        doc = self._activities.find_one_and_update(
            {"_id": str(activity_id)},
            {"$set": {**fields, "actualizadoEn": now_utc()}},
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None

    def delete(self, activity_id: str) -> bool:
        return self._activities.delete_one({"_id": str(activity_id)}).deleted_count > 0

    def reserve_seat(self, activity_id: str) -> Optional[Activity]:
        doc = self._activities.find_one_and_update(
            {
                "_id": str(activity_id),
                "estado": ActivityState.ACTIVA.value,
                "$or": [{"capacidad": None}, {"capacidad": {"$gt": 0}}],
            },
            [
                {
                    "$set": {
                        "capacidad": {
                            "$cond": [
                                {"$isNumber": "$capacidad"},
                                {"$subtract": ["$capacidad", 1]},
                                "$capacidad",
                            ]
                        },
                        "actualizadoEn": now_utc(),
                    }
                }
            ],
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None

    def release_seat(self, activity_id: str) -> Optional[Activity]:
        doc = self._activities.find_one_and_update(
            {"_id": str(activity_id)},
            [
                {
                    "$set": {
                        "capacidad": {
                            "$cond": [
                                {"$isNumber": "$capacidad"},
                                {"$add": ["$capacidad", 1]},
                                "$capacidad",
                            ]
                        },
                        "actualizadoEn": now_utc(),
                    }
                }
            ],
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None

    def close(self, activity_id: str, *, reason: str, closed_at: datetime) -> Optional[Activity]:
        doc = self._activities.find_one_and_update(
            {"_id": str(activity_id), "estado": {"$ne": ActivityState.CLOSED.value}},
            {
                "$set": {
                    "estado": ActivityState.CLOSED.value,
                    "fechaCierre": closed_at,
                    "motivoCierre": reason,
                    "actualizadoEn": now_utc(),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None
