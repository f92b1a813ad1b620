from __future__ import annotations

import json
from pathlib import Path

import pytest

from pysections import SectionHandle, SectionStore
from pysections.dotpath import split_path

DEFAULTS = {"db": {"host": "localhost", "options": {"ssl": {"mode": "require"}}}}


def test_split_path():
    assert split_path("db.host") == ("db", "host")
    assert split_path(("db", "host")) == ("db", "host")
    for bad in ("", "db..host", ".db", "db."):
        with pytest.raises(ValueError):
            split_path(bad)


def test_single_segment_returns_handle():
    store = SectionStore()
    handle = store.dot("db")
    assert isinstance(handle, SectionHandle)
    assert handle is store["db"]


def test_two_segments_match_get():
    store = SectionStore(defaults=DEFAULTS)
    assert store.dot("db.host") == store.get("db", "host") == "localhost"
    store.set("db", "host", "h")
    assert store.dot("db.host") == "h"
    assert store.dot("nothing.prefix") is None


def test_deeper_segments_descend_into_mappings():
    store = SectionStore(defaults=DEFAULTS)
    assert store.dot("db.options.ssl") == {"mode": "require"}
    assert store.dot("db.options.ssl.mode") == "require"
    assert store.dot("db.options.missing") is None
    assert store.dot("db.options.ssl.mode.deeper") is None
    assert store.dot("db.host.anything") is None


def test_write_then_read():
    store = SectionStore()
    result = store.dot("db.options.pool.size", 10)
    assert result is store
    assert store.dot("db.options.pool.size") == 10
    assert store.get("db", "options") == {"pool": {"size": 10}}


def test_write_keeps_siblings():
    store = SectionStore()
    store.dot("db.options.a", 1).dot("db.options.b", 2).dot("db.host", "h")
    assert store.get_all("db") == {"options": {"a": 1, "b": 2}, "host": "h"}


def test_write_replaces_scalars_on_the_way():
    store = SectionStore()
    store.set("a", "b", 5)
    store.dot("a.b.c.d", "v")
    assert store.get("a", "b") == {"c": {"d": "v"}}


def test_write_starts_from_defaults_free_values():
    store = SectionStore(defaults=DEFAULTS)
    store.dot("db.options.timeout", 5)
    # the explicit mapping replaces the default one as a whole
    assert store.get("db", "options") == {"timeout": 5}
    assert store.get("db", "host") == "localhost"


def test_single_segment_write_replaces_section():
    store = SectionStore()
    store.set("db", "host", "h")
    store.dot("db", {"port": 1})
    assert store.get_all("db") == {"port": 1}
    with pytest.raises(TypeError):
        store.dot("db", "not a mapping")


def test_none_is_a_value_not_a_read():
    store = SectionStore(defaults=DEFAULTS)
    store.dot("db.host", None)
    assert store.has("db", "host")
    assert store.dot("db.host") is None


def test_nested_write_is_persisted(sections_dir: Path):
    store = SectionStore(sections_dir)
    store.dot("cache.redis.host", "r1")
    assert store.save("cache")
    saved = json.loads((sections_dir / "cache.json").read_text(encoding="utf-8"))
    assert saved == {"redis": {"host": "r1"}}
    assert SectionStore(sections_dir).dot("cache.redis.host") == "r1"
