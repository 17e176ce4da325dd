"""Directory tree helpers shared by restore and mirror steps."""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def is_dir_empty(path: Path) -> bool:
    """True when ``path`` is missing, not a directory, or has no entries (dotfiles count).

    A directory that cannot be listed counts as empty.
    """
    if not path.is_dir():
        return True
    try:
        return next(path.iterdir(), None) is None
    except OSError as exc:
        logger.warning("Could not list %s, treating it as empty: %s", path, exc)
        return True


def _unlink_blocking_entries(source: Path, destination: Path) -> None:
    """Remove destination entries copytree would fail on or write through.

    copytree recreates a source symlink with ``os.symlink``, which refuses an
    existing path, and ``copy2`` follows a symlink already at the destination.
    """
    for dirpath, _dirnames, filenames in source.walk():
        target_dir = destination / dirpath.relative_to(source)
        for name in filenames:
            target = target_dir / name
            if target.is_symlink() or ((dirpath / name).is_symlink() and target.is_file()):
                target.unlink()


def copy_tree(source: Path, destination: Path) -> None:
    """Copy the contents of ``source`` into ``destination``.

    Files present in both are overwritten; files only in ``destination`` are
    kept. Metadata and symlinks are preserved, and a symlink replaces whatever
    file or link sat at its path. Raises OSError (``shutil.Error`` for partial
    failures) and leaves whatever was copied so far in place.
    """
    destination.mkdir(parents=True, exist_ok=True)
    logger.debug("Copying %s/. -> %s/", source, destination)
    _unlink_blocking_entries(source, destination)
    shutil.copytree(
        source,
        destination,
        symlinks=True,
        copy_function=shutil.copy2,
        dirs_exist_ok=True,
    )
