from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import RegistrationStatus
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.file_store import JsonFileStore, find_one
from .mapper import from_document, to_document
from .model import NewRegistrationRequest, RegistrationRequest
from .repository import RegistrationRepository


class FileRegistrationRepository(RegistrationRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def get_by_id(self, request_id: str) -> Optional[RegistrationRequest]:
        doc = find_one(self._store.collection(mongo.REGISTRATION_REQUESTS), _id=str(request_id))
        return from_document(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[RegistrationRequest]:
        doc = find_one(self._store.collection(mongo.REGISTRATION_REQUESTS), correoUniversitario=email)
        return from_document(doc) if doc else None

    def create(self, new_request: NewRegistrationRequest) -> RegistrationRequest:
        with self._store.transaction() as data:
            docs = data.setdefault(mongo.REGISTRATION_REQUESTS, [])
            if find_one(docs, correoUniversitario=new_request.email):
                raise ConflictError("Ya existe una solicitud para este correo")
            doc = to_document(self._store.new_id(), new_request, now_utc())
            docs.append(doc)
        return from_document(doc)

    def list_by_status(self, status: RegistrationStatus) -> Sequence[RegistrationRequest]:
        docs = [d for d in self._store.collection(mongo.REGISTRATION_REQUESTS) if d.get("status") == status.value]
        docs.sort(key=lambda d: d.get("createdAt") or datetime.min)
        return [from_document(d) for d in docs]

    def decide(
        self,
        request_id: str,
        *,
        status: RegistrationStatus,
        reviewer_id: Optional[str],
        notes: str = "",
    ) -> Optional[RegistrationRequest]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.REGISTRATION_REQUESTS, []), _id=str(request_id))
            if not doc or doc.get("status") != RegistrationStatus.PENDING.value:
                return None
            now = now_utc()
            doc.update(
                {
                    "status": status.value,
                    "reviewedBy": reviewer_id,
                    "reviewedAt": now,
                    "reviewNotes": notes,
                    "updatedAt": now,
                }
            )
        return from_document(doc)

    def reopen(self, request_id: str, *, status: RegistrationStatus) -> Optional[RegistrationRequest]:
        with self._store.transaction() as data:
            doc = find_one(data.setdefault(mongo.REGISTRATION_REQUESTS, []), _id=str(request_id))
            if not doc or doc.get("status") != status.value:
                return None
            doc.update(
                {
                    "status": RegistrationStatus.PENDING.value,
                    "reviewedBy": None,
                    "reviewedAt": None,
                    "reviewNotes": "",
                    "updatedAt": now_utc(),
                }
            )
        return from_document(doc)
