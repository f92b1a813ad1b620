from __future__ import annotations

from pathlib import Path

import pytest

from pysections import SectionStore, StoreOptions


def test_from_mapping_accepts_both_spellings(tmp_path: Path):
    opts = StoreOptions.from_mapping(
        {"path": str(tmp_path), "initialConfig": {"db": {"host": "h"}}, "useSharedCache": "yes"}
    )
    assert opts.path == tmp_path
    assert opts.initial_config == {"db": {"host": "h"}}
    assert opts.use_shared_cache is True

    snake = StoreOptions.from_mapping({"initial_config": None, "use_shared_cache": False})
    assert snake.path is None
    assert snake.initial_config == {}
    assert snake.use_shared_cache is False


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ValueError):
        StoreOptions.from_mapping({"pth": "/tmp"})
    with pytest.raises(ValueError):
        StoreOptions.from_mapping({"useSharedCache": "maybe"})


def test_extension_is_normalised():
    assert StoreOptions(extension="yaml").extension == ".yaml"


def test_from_env(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("PYSECTIONS_PATH", str(tmp_path))
    monkeypatch.setenv("PYSECTIONS_SHARED_CACHE", "1")
    monkeypatch.setenv("PYSECTIONS_EXTENSION", "toml")
    opts = StoreOptions.from_env()
    assert opts.path == tmp_path
    assert opts.use_shared_cache is True
    assert opts.extension == ".toml"


def test_from_env_defaults(monkeypatch):
    for name in ("PYSECTIONS_PATH", "PYSECTIONS_SHARED_CACHE", "PYSECTIONS_EXTENSION"):
        monkeypatch.delenv(name, raising=False)
    opts = StoreOptions.from_env()
    assert opts == StoreOptions()


def test_for_app(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("PYSECTIONS_HOME", str(tmp_path))
    opts = StoreOptions.for_app("demo", use_shared_cache=True)
    assert opts.path == tmp_path.resolve() / "demo"
    assert opts.use_shared_cache


def test_store_from_options(sections_dir: Path):
    opts = StoreOptions(path=sections_dir, initial_config={"app": {"name": "demo"}}, extension=".yaml")
    store = SectionStore.from_options(opts, defaults={"app": {"debug": False}})
    assert store.path == sections_dir
    assert store.extension == ".yaml"
    assert store.get("app", "name") == "demo"
    assert store.get("app", "debug") is False
    assert store.save("app")
    assert (sections_dir / "app.yaml").exists()
