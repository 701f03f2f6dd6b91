from __future__ import annotations

from typing import Optional, Sequence

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..common.datetime_utils import now_utc
from ..core.enums import RegistrationStatus
from ..core.exceptions import ConflictError
from ..database import mongo
from ..database.mongo import MongoConnection
from .mapper import from_document, to_document
from .model import NewRegistrationRequest, RegistrationRequest
from .repository import RegistrationRepository


class MongoRegistrationRepository(RegistrationRepository):
    def __init__(self, conn: MongoConnection):
        self._requests = conn.collection(mongo.REGISTRATION_REQUESTS)

    def get_by_id(self, request_id: str) -> Optional[RegistrationRequest]:
        doc = self._requests.find_one({"_id": str(request_id)})
        return from_document(doc) if doc else None

    def get_by_email(self, email: str) -> Optional[RegistrationRequest]:
        doc = self._requests.find_one({"correoUniversitario": email})
        return from_document(doc) if doc else None

    def create(self, new_request: NewRegistrationRequest) -> RegistrationRequest:
        doc = to_document(mongo.new_id(), new_request, now_utc())
        try:
            self._requests.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Ya existe una solicitud para este correo")
        return from_document(doc)

    def list_by_status(self, status: RegistrationStatus) -> Sequence[RegistrationRequest]:
        cursor = self._requests.find({"status": status.value}).sort("createdAt", ASCENDING)
        return [from_document(d) for d in cursor]

    def decide(
        self,
        request_id: str,
        *,
        status: RegistrationStatus,
        reviewer_id: Optional[str],
        notes: str = "",
    ) -> Optional[RegistrationRequest]:
        now = now_utc()
        doc = self._requests.find_one_and_update(
            {"_id": str(request_id), "status": RegistrationStatus.PENDING.value},
            {
                "$set": {
                    "status": status.value,
                    "reviewedBy": reviewer_id,
                    "reviewedAt": now,
                    "reviewNotes": notes,
                    "updatedAt": now,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None

    def reopen(self, request_id: str, *, status: RegistrationStatus) -> Optional[RegistrationRequest]:
        doc = self._requests.find_one_and_update(
            {"_id": str(request_id), "status": status.value},
            {
                "$set": {
                    "status": RegistrationStatus.PENDING.value,
                    "reviewedBy": None,
                    "reviewedAt": None,
                    "reviewNotes": "",
                    "updatedAt": now_utc(),
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return from_document(doc) if doc else None
