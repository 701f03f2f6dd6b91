"""Backup storage.

Note: the Mongo backend uses `mongodump` (MongoDB Database Tools); the file
backend just copies the JSON data file.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from dotenv import load_dotenv

from ulsconnect.main import load_settings


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")

    if str(settings.get("STORAGE_BACKEND")).lower() == "file":
        source = Path(settings["DATA_FILE"])
        if not source.exists():
            raise SystemExit(f"No data file at {source}")
        out_file = out_dir / f"ulsconnect_{ts}.json"
        shutil.copyfile(source, out_file)
        print(f"OK: Backup created: {out_file}")
        return

    out_path = out_dir / f"ulsconnect_{ts}"
    cmd = ["mongodump", f"--uri={settings['MONGO_URI']}", f"--db={settings['MONGO_DB']}", f"--out={out_path}"]
    try:
        subprocess.run(cmd, stderr=subprocess.PIPE, check=True)
        print(f"OK: Backup created: {out_path}")
    except FileNotFoundError:
        raise SystemExit("`mongodump` not found. Install the MongoDB Database Tools.")


if __name__ == "__main__":
    main()
