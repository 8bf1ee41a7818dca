"""
Local key-value persistence for the CV document.

``JsonFileStore`` keeps one ``<key>.json`` file per key. Reading back goes
through ``migrate_cv``; anything that cannot be read or decoded counts as
"no document" instead of an error.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

from cvdoc import config
from cvdoc.migrator import migrate_cv

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileStore:
    def __init__(self, root: str | Path | None = None):
        self.root = Path(root if root is not None else config.DATA_DIR)

    def _path(self, key: str) -> Path:
        return self.root / f"{_UNSAFE.sub('_', key)}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def load_cv(store, key: str = config.STORAGE_KEY) -> Optional[Dict[str, Any]]:
    try:
        raw = store.read(key)
    except Exception:
        logger.warning("failed to read CV data from %r", key, exc_info=True)
        return None
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("stored CV data under %r is not valid JSON", key)
        return None
    return migrate_cv(data)


def save_cv(store, data: Dict[str, Any], key: str = config.STORAGE_KEY) -> None:
    store.write(key, json.dumps(data, ensure_ascii=False))


def clear_cv(store, key: str = config.STORAGE_KEY) -> None:
    store.delete(key)
