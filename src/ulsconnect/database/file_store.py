from __future__ import annotations

import json
import os
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

Collections = dict[str, list[dict[str, Any]]]


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"$date": value.isoformat()}
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def _decode(obj: dict[str, Any]) -> Any:
    if len(obj) == 1 and "$date" in obj:
        return datetime.fromisoformat(obj["$date"])
    return obj


class JsonFileStore:
    """Development storage: every collection lives in a single JSON file.

    All reads and read-modify-write cycles take the same re-entrant lock, so
    each repository call is atomic within the process. Writes go to a temp
    file first and are swapped in with ``os.replace``.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Collections:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text, object_hook=_decode)
        return data if isinstance(data, dict) else {}

    def _write(self, data: Collections) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, default=_encode, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)

    @contextmanager
    def transaction(self) -> Iterator[Collections]:
        """Yield the whole dataset; it is written back if the block does not raise."""
        with self._lock:
            data = self._read()
            yield data
            self._write(data)

    def snapshot(self) -> Collections:
        with self._lock:
            return self._read()

    def collection(self, name: str) -> list[dict[str, Any]]:
        """Read-only copy of one collection."""
        return list(self.snapshot().get(name, []))

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex


def find_one(docs: list[dict[str, Any]], **criteria: Any) -> dict[str, Any] | None:
    for doc in docs:
        if all(doc.get(k) == v for k, v in criteria.items()):
            return doc
    return None
