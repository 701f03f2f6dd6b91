from __future__ import annotations

import itertools
from datetime import timedelta

import pytest

from ulsconnect.common.datetime_utils import isoformat, now_utc
from ulsconnect.container import build_container
from ulsconnect.core.enums import Role


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def activity_closed(self, *, email, name, activity_title, reason):
        self.sent.append(("activity_closed", email, activity_title, reason))
        return True

    def registration_requested(self, *, email, name):
        self.sent.append(("registration_requested", email))
        return True

    def registration_approved(self, *, email, name):
        self.sent.append(("registration_approved", email))
        return True

    def registration_rejected(self, *, email, name, notes):
        self.sent.append(("registration_rejected", email, notes))
        return True


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def settings(tmp_path):
    return {
        "STORAGE_BACKEND": "file",
        "DATA_FILE": str(tmp_path / "data.json"),
        "SECRET_KEY": "test-secret",
        "TESTING": True,
        "LOG_LEVEL": "WARNING",
        "AUTO_INIT_DB": False,
    }


@pytest.fixture
def container(settings, notifier):
    return build_container(settings=settings, notifier=notifier)


@pytest.fixture
def make_user(container):
    counter = itertools.count(1)

    def _make(role=Role.ESTUDIANTE, *, name=None, password="secret1"):
        n = next(counter)
        return container.user_service.create_account(
            email=f"user{n}@alumnouls.cl",
            password=password,
            name=name or f"Voluntario {n}",
            role=role,
        )

    return _make


def activity_payload(*, capacity=None, start=None, hours=2, **extra):
    start = start or now_utc() + timedelta(days=3)
    payload = {
        "titulo": "Limpieza de playa",
        "descripcion": "Jornada de limpieza",
        "area": "Medioambiente",
        "tipo": "Voluntariado",
        "fechaInicio": isoformat(start),
        "fechaFin": isoformat(start + timedelta(hours=hours)),
        "ubicacion": {"nombreComuna": "La Serena", "nombreLugar": "Playa El Faro"},
        "capacidad": capacity,
    }
    payload.update(extra)
    return payload


@pytest.fixture
def make_activity(container):
    def _make(**kwargs):
        return container.activity_service.create(activity_payload(**kwargs), creator_id="staff-1")

    return _make


@pytest.fixture
def activity_data():
    return activity_payload
