from __future__ import annotations

from typing import Optional, Sequence

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_utc
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.mongo import MongoConnection
from .mapper import from_document, to_document
from .model import ImpactReport, NewImpactReport
from .repository import ImpactReportRepository


class MongoImpactReportRepository(ImpactReportRepository):
    def __init__(self, conn: MongoConnection):
        self._reports = conn.collection(mongo.IMPACT_REPORTS)

    def get_by_activity(self, activity_id: str) -> Optional[ImpactReport]:
        doc = self._reports.find_one({"idActividad": str(activity_id)})
        return from_document(doc) if doc else None

    def create(self, new_report: NewImpactReport) -> ImpactReport:
        doc = to_document(mongo.new_id(), new_report, now_utc())
        try:
            self._reports.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Ya existe un reporte de impacto para esta actividad")
        return from_document(doc)

    def list_recent(self, limit: int) -> Sequence[ImpactReport]:
        cursor = self._reports.find({}).sort("creadoEn", DESCENDING).limit(int(limit))
        return [from_document(d) for d in cursor]
