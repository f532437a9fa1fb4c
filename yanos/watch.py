"""Poll source directories and rebuild once changes settle."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 1.0
DEFAULT_POLL_INTERVAL = 0.25


@dataclass(frozen=True)
class Change:
    kind: str  # "create", "write" or "remove"
    path: Path


Snapshot = Dict[Path, int]


def take_snapshot(directories: Iterable[Path]) -> Snapshot:
    """Map every file below ``directories`` to its modification time."""
    snapshot: Snapshot = {}
    for directory in directories:
        directory = Path(directory)
        if not directory.is_dir():
            continue
        for root, _, files in os.walk(directory):
            for name in files:
                path = Path(root) / name
                try:
                    snapshot[path] = path.stat().st_mtime_ns
                except FileNotFoundError:
                    # removed between listing and stat
                    continue
    return snapshot


def diff_snapshots(old: Snapshot, new: Snapshot) -> List[Change]:
    changes: List[Change] = []
    for path, mtime in new.items():
        if path not in old:
            changes.append(Change("create", path))
        elif old[path] != mtime:
            changes.append(Change("write", path))
    for path in old:
        if path not in new:
            changes.append(Change("remove", path))
    return sorted(changes, key=lambda change: (str(change.path), change.kind))


def watch_directories(
    directories: Iterable[Path],
    listener: Callable[[List[Change]], None],
    debounce: float = DEFAULT_DEBOUNCE,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    max_events: Optional[int] = None,
) -> None:
    """Call ``listener`` with each settled batch of changes.

    Changes are collected until the directories have been quiet for
    ``debounce`` seconds. A rename shows up as a remove plus a create.
    ``max_events`` stops the loop after that many batches.
    """
    directories = [Path(directory) for directory in directories]
    for directory in directories:
        logger.info("Watching %s", directory)

    snapshot = take_snapshot(directories)
    pending: List[Change] = []
    last_change = 0.0
    delivered = 0

    while max_events is None or delivered < max_events:
        time.sleep(poll_interval)
        current = take_snapshot(directories)
        changes = diff_snapshots(snapshot, current)
        snapshot = current

        if changes:
            for change in changes:
                logger.debug("Detected %s of %s", change.kind, change.path)
            pending.extend(changes)
            last_change = time.monotonic()
            continue

        if pending and time.monotonic() - last_change >= debounce:
            batch, pending = pending, []
            listener(batch)
            delivered += 1
