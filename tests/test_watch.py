"""Tests for yanos.watch: snapshot diffing and debounced delivery."""

from __future__ import annotations

import threading
import time
from pathlib import Path

from yanos.watch import Change, diff_snapshots, take_snapshot, watch_directories


class TestSnapshots:
    def test_take_snapshot_walks_recursively(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.md").write_text("a", encoding="utf-8")
        (tmp_path / "sub" / "b.md").write_text("b", encoding="utf-8")
        snapshot = take_snapshot([tmp_path, tmp_path / "missing"])
        assert set(snapshot) == {tmp_path / "a.md", tmp_path / "sub" / "b.md"}

    def test_diff(self):
        old = {Path("keep"): 1, Path("edit"): 1, Path("gone"): 1}
        new = {Path("keep"): 1, Path("edit"): 2, Path("added"): 1}
        assert diff_snapshots(old, new) == [
            Change("create", Path("added")),
            Change("write", Path("edit")),
            Change("remove", Path("gone")),
        ]

    def test_no_changes(self):
        snapshot = {Path("a"): 1}
        assert diff_snapshots(snapshot, dict(snapshot)) == []


class TestWatchDirectories:
    def test_delivers_one_batch_after_quiet_period(self, tmp_path):
        batches = []
        watcher = threading.Thread(
            target=watch_directories,
            args=([tmp_path], batches.append),
            kwargs={"debounce": 0.2, "poll_interval": 0.02, "max_events": 1},
            daemon=True,
        )
        watcher.start()
        time.sleep(0.1)

        post = tmp_path / "post.md"
        post.write_text("one", encoding="utf-8")

        watcher.join(timeout=5)
        assert not watcher.is_alive()
        assert len(batches) == 1
        assert Change("create", post) in batches[0]
