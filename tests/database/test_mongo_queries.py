from __future__ import annotations

from datetime import datetime

from ulsconnect.activities.mongo_activity_repository import MongoActivityRepository
from ulsconnect.database.mongo import MongoConfig, MongoConnection
from ulsconnect.enrollments.mongo_enrollment_repository import MongoEnrollmentRepository
from ulsconnect.users.model import PointEntry
from ulsconnect.users.mongo_user_repository import MongoUserRepository


class FakeCollection:
    """Records update calls and answers with a canned document."""

    def __init__(self, result=None):
        self.calls = []
        self.result = result

    def find_one_and_update(self, filters, update, **kwargs):
        self.calls.append((filters, update, kwargs))
        return self.result

    def find_one(self, filters):
        self.calls.append((filters, None, {}))
        return self.result


def _conn(collection):
    class Client:
        def __getitem__(self, _db):
            return {"actividades": collection, "usuarios": collection, "inscripciones": collection}

    return MongoConnection(MongoConfig(uri="mongodb://unused", database="test"), client=Client())


def test_reserve_seat_filters_on_state_and_remaining_capacity():
    coll = FakeCollection()
    repo = MongoActivityRepository(_conn(coll))

    assert repo.reserve_seat("a1") is None

    filters, pipeline, _ = coll.calls[0]
    assert filters["_id"] == "a1"
    assert filters["estado"] == "activa"
    assert {"capacidad": {"$gt": 0}} in filters["$or"]
    assert {"capacidad": None} in filters["$or"]
    assert isinstance(pipeline, list)


def test_close_only_matches_open_activities():
    coll = FakeCollection()
    repo = MongoActivityRepository(_conn(coll))

    repo.close("a1", reason="fecha_alcanzada", closed_at=datetime(2024, 1, 1))

    filters, update, _ = coll.calls[0]
    assert filters == {"_id": "a1", "estado": {"$ne": "closed"}}
    assert update["$set"]["motivoCierre"] == "fecha_alcanzada"


def test_dedupe_scoring_is_part_of_the_filter():
    coll = FakeCollection()
    repo = MongoUserRepository(_conn(coll))
    entry = PointEntry(delta=10, reason="x", activity_id="a1", recorded_by=None, recorded_at=datetime(2024, 1, 1))

    user, applied = repo.apply_points("u1", entry, dedupe_by_activity=True, history_limit=50)

    filters, update, _ = coll.calls[0]
    assert filters == {"_id": "u1", "historialPuntos.actividad": {"$ne": "a1"}}
    assert update["$inc"] == {"puntos": 10}
    assert update["$push"]["historialPuntos"]["$position"] == 0
    assert update["$push"]["historialPuntos"]["$slice"] == 50
    assert (user, applied) == (None, False)


def test_cancel_only_matches_cancellable_statuses():
    coll = FakeCollection()
    repo = MongoEnrollmentRepository(_conn(coll))

    assert repo.cancel("e1", reason="viaje", cancellable=["activa", "inscrito"]) is None

    filters, update, _ = coll.calls[0]
    assert filters == {"_id": "e1", "estado": {"$in": ["activa", "inscrito"]}}
    assert update["$set"]["estado"] == "cancelada"
    assert update["$set"]["motivoCancelacion"] == "viaje"
