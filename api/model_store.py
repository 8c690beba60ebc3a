# api/model_store.py
"""
Directory-backed key -> blob store for serialized models.
"""

import logging
import re
from pathlib import Path

from pipeline.errors import PersistenceError

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


class ModelStore:
    def __init__(self, root, suffix=".pt"):
        self.root = Path(root)
        self.suffix = suffix

    def _path(self, key):
        if not _KEY_RE.match(key):
            raise PersistenceError(f"Invalid model key: {key!r}", key=key)
        return self.root / f"{key}{self.suffix}"

    def exists(self, key) -> bool:
        return self._path(key).is_file()

    def save(self, key, blob: bytes):
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            tmp.write_bytes(blob)
            tmp.replace(path)
        except OSError as e:
            raise PersistenceError(str(e), key=key) from e
        logger.info("Saved model blob '%s' (%d bytes) -> %s", key, len(blob), path)

    def load(self, key) -> bytes:
        path = self._path(key)
        if not path.is_file():
            raise PersistenceError(f"No model stored under key '{key}'", key=key, missing=True)
        try:
            blob = path.read_bytes()
        except OSError as e:
            raise PersistenceError(str(e), key=key) from e
        logger.info("Loaded model blob '%s' (%d bytes)", key, len(blob))
        return blob

    def delete(self, key):
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            raise PersistenceError(f"No model stored under key '{key}'", key=key, missing=True)
        except OSError as e:
            raise PersistenceError(str(e), key=key) from e
