"""Example: drive the service layer directly (no Flask).

Controllers are thin; enrollment, attendance and scoring rules live in the
services wired by `build_container`.
"""

import sys
import tempfile
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from ulsconnect.common.datetime_utils import isoformat, now_utc  # noqa: E402
from ulsconnect.container import build_container  # noqa: E402
from ulsconnect.core.enums import Role  # noqa: E402


def main():
    data_file = Path(tempfile.mkdtemp()) / "demo.json"
    c = build_container(settings={"STORAGE_BACKEND": "file", "DATA_FILE": str(data_file)})

    staff = c.user_service.create_account(email="staff@userena.cl", password="secret1", name="Staff", role=Role.STAFF)
    ana = c.user_service.create_account(email="ana@alumnouls.cl", password="secret1", name="Ana")

    start = now_utc() - timedelta(hours=3)
    activity = c.activity_service.create(
        {
            "titulo": "Taller de reciclaje",
            "descripcion": "Demo",
            "area": "Medioambiente",
            "tipo": "Taller",
            "fechaInicio": isoformat(start),
            "fechaFin": isoformat(start + timedelta(hours=2)),
            "ubicacion": {"nombreComuna": "Coquimbo", "nombreLugar": "Sede ULS"},
            "capacidad": 10,
        },
        creator_id=staff.user_id,
    )
    c.enrollment_service.enroll(ana.user_id, activity.activity_id)
    att = c.attendance_service.create_attendance_list(activity.activity_id, staff.user_id)
    c.attendance_service.take_attendance(att.attendance_id, present=[ana.user_id], actor_id=staff.user_id)
    print(c.scoring_service.score_activity(activity.activity_id, actor_id=staff.user_id).results)
    print(c.report_service.create_report(activity.activity_id, actor_id=staff.user_id).metrics)


if __name__ == "__main__":
    main()
