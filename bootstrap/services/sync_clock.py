"""Sync clock: decide restore-vs-skip from the remote and local ``.last-sync`` markers."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from bootstrap.services.datetime_service import to_epoch

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class SyncVerdict(StrEnum):
    """Outcome of comparing the remote backup marker against the local one."""

    RESTORE = "restore"
    SKIP = "skip"


def read_marker(path: Path) -> str | None:
    """Return the raw marker text, or None when no marker file exists.

    A marker that exists but cannot be read is still present; its empty
    value later compares as epoch zero.
    """
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read sync marker %s: %s", path, exc)
        return ""


def _bootstrap_without_markers(local: str | None) -> SyncVerdict:
    """Remote has no marker: pull once if local has never synced either.

    The backup may have been written by a producer that never writes a
    marker; losing that data on first boot is worse than one extra restore.
    """
    if local is None:
        logger.info("No sync timestamps found, will restore from backup")
        return SyncVerdict.RESTORE
    logger.info("No remote sync timestamp found, skipping restore")
    return SyncVerdict.SKIP


def _local_never_synced() -> SyncVerdict:
    logger.info("No local sync timestamp, will restore from backup")
    return SyncVerdict.RESTORE


def _newer_wins_local_on_tie(remote: str, local: str) -> SyncVerdict:
    """Restore only when remote is strictly newer; equal instants keep local state."""
    remote_epoch = to_epoch(remote)
    local_epoch = to_epoch(local)
    logger.info("Remote last sync: %s", remote)
    logger.info("Local last sync: %s", local)
    if remote_epoch > local_epoch:
        logger.info("Remote backup is newer, will restore")
        return SyncVerdict.RESTORE
    logger.info("Local data is newer or same, skipping restore")
    return SyncVerdict.SKIP


def decide(remote: str | None, local: str | None) -> SyncVerdict:
    """Compare marker values (None meaning the marker file is absent)."""
    if remote is None:
        return _bootstrap_without_markers(local)
    if local is None:
        return _local_never_synced()
    return _newer_wins_local_on_tie(remote, local)


def compare(remote_marker: Path, local_marker: Path) -> SyncVerdict:
    """Compare the marker files at the two paths."""
    return decide(read_marker(remote_marker), read_marker(local_marker))
