from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.file_store import JsonFileStore, find_one
from .mapper import from_document, to_document
from .model import ImpactReport, NewImpactReport
from .repository import ImpactReportRepository


class FileImpactReportRepository(ImpactReportRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def get_by_activity(self, activity_id: str) -> Optional[ImpactReport]:
        doc = find_one(self._store.collection(mongo.IMPACT_REPORTS), idActividad=str(activity_id))
        return from_document(doc) if doc else None

    def create(self, new_report: NewImpactReport) -> ImpactReport:
        with self._store.transaction() as data:
            docs = data.setdefault(mongo.IMPACT_REPORTS, [])
            if find_one(docs, idActividad=new_report.activity_id):
                raise ConflictError("Ya existe un reporte de impacto para esta actividad")
            doc = to_document(self._store.new_id(), new_report, now_utc())
            docs.append(doc)
        return from_document(doc)

    def list_recent(self, limit: int) -> Sequence[ImpactReport]:
        docs = self._store.collection(mongo.IMPACT_REPORTS)
        docs.sort(key=lambda d: d.get("creadoEn") or datetime.min, reverse=True)
        return [from_document(d) for d in docs[: int(limit)]]
