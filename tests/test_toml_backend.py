from pathlib import Path

import pytest

from pysections import SectionStore
from pysections.backends.toml_backend import TomlBackend
from pysections.errors import SectionLoadError, SectionSaveError


def test_toml_backend_roundtrip(tmp_path: Path):
    data = {"name": "Sigma", "port": 5432, "pool": {"size": 10, "hosts": ["a", "b"]}}
    path = tmp_path / "t.toml"
    TomlBackend().save(path, data)
    assert TomlBackend().load(path) == data


def test_invalid_toml(tmp_path: Path):
    path = tmp_path / "bad.toml"
    path.write_text("name = ", encoding="utf-8")
    with pytest.raises(SectionLoadError):
        TomlBackend().load(path)


def test_nested_none_cannot_be_saved(tmp_path: Path):
    with pytest.raises(SectionSaveError):
        TomlBackend().save(tmp_path / "none.toml", {"pool": {"size": None}})


def test_store_reports_unrepresentable_section(sections_dir: Path):
    store = SectionStore(sections_dir, extension=".toml")
    store.set("pool", "limits", {"max": None})
    assert store.save("pool") is False
    store.set("pool", "limits", {"max": 4})
    assert store.save("pool") is True
    assert SectionStore(sections_dir, extension=".toml").get("pool", "limits") == {"max": 4}


def test_invalid_utf8(tmp_path: Path):
    path = tmp_path / "latin.toml"
    path.write_bytes(b'host = "\xff\xfe"\n')
    with pytest.raises(SectionLoadError):
        TomlBackend().load(path)
