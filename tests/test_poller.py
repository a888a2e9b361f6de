"""Tests for the background cleanup poller."""

from __future__ import annotations

import asyncio
import logging
import time

import pytest

from clean_cut_mcp.models.workspace import ManifestRecord
from clean_cut_mcp.workspace.manifest import ManifestStore
from clean_cut_mcp.workspace.poller import CleanupPoller


def _record(name: str) -> ManifestRecord:
    return ManifestRecord(name=name, template_path=f"./assets/animations/{name}", duration=240)


@pytest.fixture()
def animations(tmp_path):
    directory = tmp_path / "src" / "assets" / "animations"
    directory.mkdir(parents=True)
    for name in ("Keep", "Drop"):
        (directory / f"{name}.tsx").write_text("")
    return directory


@pytest.fixture()
def store(tmp_path) -> ManifestStore:
    store = ManifestStore(tmp_path)
    store.write([_record("Keep"), _record("Drop")])
    return store


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_first_poll_sets_baseline(self, store, animations):
        poller = CleanupPoller(store, animations)
        assert await poller.poll_once() is None
        assert poller.known == {"Keep", "Drop"}

    @pytest.mark.asyncio
    async def test_deletion_prunes_manifest(self, store, animations):
        poller = CleanupPoller(store, animations)
        await poller.poll_once()
        (animations / "Drop.tsx").unlink()

        result = await poller.poll_once()

        assert result is not None
        assert result.removed == ["Drop"]
        assert [r.name for r in store.read()] == ["Keep"]

    @pytest.mark.asyncio
    async def test_new_file_does_not_prune(self, store, animations):
        poller = CleanupPoller(store, animations)
        await poller.poll_once()
        (animations / "Fresh.tsx").write_text("")
        assert await poller.poll_once() is None
        assert len(store.read()) == 2

    @pytest.mark.asyncio
    async def test_slow_prune_times_out(self, store, animations, monkeypatch, caplog):
        def slow_prune(existing=None):
            time.sleep(0.3)

        monkeypatch.setattr(store, "prune", slow_prune)
        poller = CleanupPoller(store, animations, timeout=0.05)
        await poller.poll_once()
        (animations / "Drop.tsx").unlink()

        with caplog.at_level(logging.ERROR, logger="clean_cut_mcp.workspace.poller"):
            assert await poller.poll_once() is None
        assert "Cleanup timed out" in caplog.text


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_and_stop(self, store, animations):
        poller = CleanupPoller(store, animations, interval=0.01)
        task = poller.start()
        assert poller.start() is task
        await asyncio.sleep(0.05)
        assert poller.running is True

        (animations / "Drop.tsx").unlink()
        for _ in range(50):
            if [r.name for r in store.read()] == ["Keep"]:
                break
            await asyncio.sleep(0.01)
        assert [r.name for r in store.read()] == ["Keep"]

        await poller.stop()
        assert poller.running is False

    @pytest.mark.asyncio
    async def test_poll_errors_do_not_stop_the_loop(self, store, animations, monkeypatch):
        calls = 0

        async def failing_poll():
            nonlocal calls
            calls += 1
            raise RuntimeError("disk hiccup")

        poller = CleanupPoller(store, animations, interval=0.01)
        monkeypatch.setattr(poller, "poll_once", failing_poll)
        poller.start()
        await asyncio.sleep(0.05)
        await poller.stop()
        assert calls > 1
