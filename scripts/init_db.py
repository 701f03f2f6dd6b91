from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from dotenv import load_dotenv

from ulsconnect.common.log import configure_logging
from ulsconnect.database.bootstrap import ensure_indexes, list_collections
from ulsconnect.database.mongo import MongoConfig, MongoConnection
from ulsconnect.main import load_settings


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging(settings.get("LOG_LEVEL", "INFO"))

    conn = MongoConnection(MongoConfig(uri=settings["MONGO_URI"], database=settings["MONGO_DB"]))
    try:
        conn.ping()
        ensure_indexes(conn)
        print(f"OK: indexes ready -> {settings['MONGO_DB']} (collections={len(list_collections(conn))})")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
