"""
FastAPI dependencies: session + model store singletons.
"""

import threading
from functools import lru_cache

from api.model_store import ModelStore
from pipeline.session import Session
from preprocessor.helpers import load_config, resolve_path


@lru_cache(maxsize=1)
def get_settings():
    return load_config()


_session = None

# One client at a time: sync endpoints run in a threadpool and
# every session operation must see a consistent snapshot.
session_lock = threading.Lock()


def get_session() -> Session:
    global _session
    if _session is None:
        _session = Session(label_name=get_settings()["label_column"])
    return _session


@lru_cache(maxsize=1)
def get_store() -> ModelStore:
    return ModelStore(resolve_path(get_settings()["model_store_dir"]))


def get_model_key() -> str:
    return get_settings()["model_key"]
