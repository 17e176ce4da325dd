"""Backup layout resolution: which generation of the remote backup to read per category."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from bootstrap.config import CONFIG_FILENAME, LEGACY_CONFIG_FILENAME
from bootstrap.filesystem.tree_ops import is_dir_empty

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class Category(StrEnum):
    """Independently restorable unit of state."""

    CONFIG = "config"
    WORKSPACE = "workspace"
    SKILLS = "skills"


class BackupLayout(StrEnum):
    """On-disk generation of the backup for one category, newest first."""

    CURRENT = "current"
    LEGACY_NESTED = "legacy_nested"
    LEGACY_FLAT = "legacy_flat"
    ABSENT = "absent"


@dataclass(frozen=True)
class LayoutCandidate:
    """One place a category's backup may live, relative to the backup root.

    ``marker_file`` set: the candidate matches when that file exists in it.
    Otherwise it matches when the directory is non-empty.

    ``nested_dir``/``root_sentinel`` describe the double-nesting defect of an
    older producer: if ``<dir>/<nested_dir>`` is non-empty and ``<dir>`` has
    no ``<root_sentinel>`` subdirectory, the nested directory is the source.
    """

    layout: BackupLayout
    relative_dir: str
    marker_file: str | None = None
    nested_dir: str | None = None
    root_sentinel: str | None = None

    def directory(self, backup_root: Path) -> Path:
        return backup_root / self.relative_dir if self.relative_dir else backup_root


@dataclass(frozen=True)
class ResolvedBackup:
    """Where (if anywhere) to restore a category from."""

    category: Category
    layout: BackupLayout
    source: Path | None = None
    double_nested: bool = False

    @property
    def found(self) -> bool:
        return self.source is not None


# Probe order is precedence order. New generations go at the front.
LAYOUT_CANDIDATES: dict[Category, tuple[LayoutCandidate, ...]] = {
    Category.CONFIG: (
        LayoutCandidate(BackupLayout.CURRENT, "openclaw", marker_file=CONFIG_FILENAME),
        LayoutCandidate(BackupLayout.LEGACY_NESTED, "clawdbot", marker_file=LEGACY_CONFIG_FILENAME),
        LayoutCandidate(BackupLayout.LEGACY_FLAT, "", marker_file=LEGACY_CONFIG_FILENAME),
    ),
    Category.WORKSPACE: (
        LayoutCandidate(
            BackupLayout.CURRENT,
            "openclaw-workspace",
            nested_dir="workspace",
            root_sentinel="memory",
        ),
        LayoutCandidate(
            BackupLayout.LEGACY_FLAT,
            "workspace",
            nested_dir="workspace",
            root_sentinel="memory",
        ),
    ),
    Category.SKILLS: (
        LayoutCandidate(BackupLayout.CURRENT, "openclaw-skills"),
        LayoutCandidate(BackupLayout.LEGACY_FLAT, "skills"),
    ),
}


def _matches(candidate: LayoutCandidate, directory: Path) -> bool:
    if candidate.marker_file is not None:
        return (directory / candidate.marker_file).is_file()
    return not is_dir_empty(directory)


def _unwrap_double_nesting(candidate: LayoutCandidate, directory: Path) -> Path | None:
    if candidate.nested_dir is None:
        return None
    nested = directory / candidate.nested_dir
    if is_dir_empty(nested):
        return None
    if candidate.root_sentinel is not None and (directory / candidate.root_sentinel).is_dir():
        return None
    return nested


def resolve(backup_root: Path, category: Category) -> ResolvedBackup:
    """Pick the first candidate location for ``category`` that holds data.

    Read-only; re-derived on every boot.
    """
    for candidate in LAYOUT_CANDIDATES[category]:
        directory = candidate.directory(backup_root)
        if not _matches(candidate, directory):
            continue
        nested = _unwrap_double_nesting(candidate, directory)
        if nested is not None:
            logger.info("Backup for %s is double-nested, using %s", category, nested)
            return ResolvedBackup(category, candidate.layout, nested, double_nested=True)
        logger.debug("Backup for %s found at %s (%s)", category, directory, candidate.layout)
        return ResolvedBackup(category, candidate.layout, directory)
    return ResolvedBackup(category, BackupLayout.ABSENT)


def resolve_all(backup_root: Path) -> dict[Category, ResolvedBackup]:
    """Resolve every category; logs once when no backup is reachable at all."""
    if not backup_root.is_dir():
        logger.info("Backup not mounted at %s, starting fresh", backup_root)
    resolved = {category: resolve(backup_root, category) for category in Category}
    if backup_root.is_dir() and not resolved[Category.CONFIG].found:
        logger.info("Backup mounted at %s but no config backup found yet", backup_root)
    return resolved
