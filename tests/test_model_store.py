"""Tests for the directory-backed model store."""

import pytest

from pipeline.errors import PersistenceError


def test_save_and_load(model_store) -> None:
    model_store.save("pipeline-failure-model", b"\x00blob")
    assert model_store.exists("pipeline-failure-model")
    assert model_store.load("pipeline-failure-model") == b"\x00blob"


def test_overwrite(model_store) -> None:
    model_store.save("k", b"one")
    model_store.save("k", b"two")
    assert model_store.load("k") == b"two"


def test_missing_key(model_store) -> None:
    with pytest.raises(PersistenceError, match="No model stored under key 'nothing'") as exc:
        model_store.load("nothing")
    assert exc.value.missing
    assert exc.value.key == "nothing"


@pytest.mark.parametrize("key", ["", "../escape", "a/b", "with space"])
def test_invalid_key(model_store, key: str) -> None:
    with pytest.raises(PersistenceError, match="Invalid model key"):
        model_store.save(key, b"x")


def test_delete(model_store) -> None:
    model_store.save("k", b"x")
    model_store.delete("k")
    assert not model_store.exists("k")
    with pytest.raises(PersistenceError):
        model_store.delete("k")


def test_write_failure_surfaces_os_message(tmp_path) -> None:
    from api.model_store import ModelStore

    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    store = ModelStore(blocker / "models")

    with pytest.raises(PersistenceError) as exc:
        store.save("k", b"x")
    assert not exc.value.missing
    assert str(exc.value)
