"""Seed an admin account and one sample activity.

Works with either storage backend (STORAGE_BACKEND from the active settings).
"""

from __future__ import annotations

import os
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from dotenv import load_dotenv

from ulsconnect.common.datetime_utils import isoformat, now_utc
from ulsconnect.common.log import configure_logging
from ulsconnect.container import build_container
from ulsconnect.core.enums import Role
from ulsconnect.core.exceptions import ConflictError
from ulsconnect.main import load_settings


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(settings.get("LOG_LEVEL", "INFO"))
    container = build_container(settings=settings)

    email = os.getenv("SEED_ADMIN_EMAIL", "admin@userena.cl")
    password = os.getenv("SEED_ADMIN_PASSWORD", "admin123")
    try:
        admin = container.user_service.create_account(email=email, password=password, name="Administrador", role=Role.ADMIN)
        print(f"OK: admin created -> {admin.email}")
    except ConflictError:
        admin = container.users_repo.get_by_email(email)
        print(f"SKIP: admin already exists -> {email}")

    start = now_utc() + timedelta(days=7)
    activity = container.activity_service.create(
        {
            "titulo": "Limpieza de playa",
            "descripcion": "Jornada de limpieza en la costa de La Serena",
            "area": "Medioambiente",
            "tipo": "Voluntariado",
            "fechaInicio": isoformat(start),
            "fechaFin": isoformat(start + timedelta(hours=3)),
            "ubicacion": {"nombreComuna": "La Serena", "nombreLugar": "Playa El Faro"},
            "capacidad": 30,
        },
        creator_id=admin.user_id,
    )
    print(f"OK: sample activity -> {activity.activity_id} ({activity.title})")


if __name__ == "__main__":
    main()
