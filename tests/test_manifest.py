"""Tests for the structured workspace manifest and Root.tsx generation."""

from __future__ import annotations

import json
import threading

import pytest

from clean_cut_mcp.models.workspace import ManifestRecord, SceneSourceRecord
from clean_cut_mcp.workspace.manifest import (
    ManifestStore,
    atomic_write_text,
    render_root_source,
    workspace_lock,
)


def _record(name: str, duration: int = 240, fields: list[str] | None = None) -> ManifestRecord:
    return ManifestRecord(
        name=name,
        template_path=f"./assets/animations/{name}",
        duration=duration,
        has_schema=fields is not None,
        schema_fields=fields or [],
    )


@pytest.fixture()
def store(tmp_path) -> ManifestStore:
    return ManifestStore(tmp_path)


class TestAtomicWrite:
    def test_writes_and_detects_no_change(self, tmp_path):
        path = tmp_path / "nested" / "file.txt"
        assert atomic_write_text(path, "hello") is True
        assert atomic_write_text(path, "hello") is False
        assert path.read_text() == "hello"
        assert [p.name for p in path.parent.iterdir()] == ["file.txt"]


class TestRenderRootSource:
    def test_imports_compositions_and_schemas(self):
        source = render_root_source([_record("Teaser", 345, ["title"]), _record("Plain")], fps=30)
        assert "import { Teaser } from './assets/animations/Teaser';" in source
        assert "const TeaserSchema = z.object({\n  title: z.string().optional()\n});" in source
        assert 'id="Teaser"' in source
        assert "durationInFrames={345}" in source
        assert "schema={TeaserSchema}" in source
        assert "PlainSchema" not in source

    def test_empty_manifest_renders_valid_root(self):
        source = render_root_source([])
        assert "export const RemotionRoot" in source
        assert "<Composition" not in source


class TestManifestStore:
    def test_read_missing_is_empty(self, store):
        assert store.read() == []

    def test_write_then_read(self, store):
        result = store.write([_record("A"), _record("B")])
        assert result.changed is True
        assert result.added == ["A", "B"]
        assert [r.name for r in store.read()] == ["A", "B"]
        document = json.loads(store.manifest_path.read_text())
        assert document["version"] == 1
        assert store.root_path.is_file()

    def test_identical_write_is_noop(self, store):
        store.write([_record("A")])
        result = store.write([_record("A")])
        assert result.changed is False
        assert result.added == []

    def test_later_duplicate_wins(self, store):
        store.write([_record("A", 100), _record("B"), _record("A", 200)])
        records = store.read()
        assert [(r.name, r.duration) for r in records] == [("B", 240), ("A", 200)]

    def test_register_replaces_in_place(self, store):
        store.write([_record("A"), _record("B")])
        result = store.register(_record("A", 300))
        assert result.records == 2
        assert [(r.name, r.duration) for r in store.read()] == [("A", 300), ("B", 240)]

    def test_register_appends_new(self, store):
        store.write([_record("A")])
        assert store.register(_record("C")).added == ["C"]

    def test_prune_with_explicit_names(self, store):
        store.write([_record("A"), _record("B")])
        result = store.prune({"B"})
        assert result.removed == ["A"]
        assert "import { A }" not in store.root_path.read_text()

    def test_prune_checks_files(self, store, tmp_path):
        animations = tmp_path / "src" / "assets" / "animations"
        animations.mkdir(parents=True)
        (animations / "Kept.tsx").write_text("")
        store.write([_record("Kept"), _record("Gone")])
        assert store.prune().removed == ["Gone"]

    def test_sync_mirrors_sources(self, store):
        store.write([_record("Old")])
        result = store.sync([SceneSourceRecord(name="New", path="/x/New.tsx", duration=90)])
        assert result.added == ["New"]
        assert result.removed == ["Old"]
        assert store.read()[0].template_path == "./assets/animations/New"

    def test_corrupt_manifest_raises(self, store):
        store.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        store.manifest_path.write_text("{not json")
        with pytest.raises(ValueError, match="Corrupt manifest"):
            store.read()

    def test_concurrent_registers_keep_every_record(self, store):
        threads = [threading.Thread(target=store.register, args=(_record(f"Scene{i}"),)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert sorted(r.name for r in store.read()) == sorted(f"Scene{i}" for i in range(8))


class TestWorkspaceLock:
    def test_same_workspace_shares_lock(self, tmp_path):
        assert workspace_lock(tmp_path) is workspace_lock(str(tmp_path))
        assert workspace_lock(tmp_path) is not workspace_lock(tmp_path / "other")
