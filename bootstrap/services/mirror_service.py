"""Workspace mirror: keep the tool-visible and runtime-visible workspace copies populated."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from bootstrap.filesystem.tree_ops import copy_tree, is_dir_empty

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class MirrorDirection(StrEnum):
    NONE = "none"
    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"


def plan_mirror(path_a: Path, path_b: Path) -> MirrorDirection:
    """Copy only from a populated side into an empty one.

    Two populated sides are left alone even if they drifted apart: the first
    populated copy wins and there is no conflict resolution.
    """
    a_empty = is_dir_empty(path_a)
    b_empty = is_dir_empty(path_b)
    if not a_empty and b_empty:
        return MirrorDirection.A_TO_B
    if a_empty and not b_empty:
        return MirrorDirection.B_TO_A
    return MirrorDirection.NONE


def reconcile(path_a: Path, path_b: Path) -> MirrorDirection:
    """Make both workspace paths non-empty and equal when exactly one is populated.

    Raises OSError when the copy fails.
    """
    path_b.mkdir(parents=True, exist_ok=True)
    direction = plan_mirror(path_a, path_b)
    if direction is MirrorDirection.A_TO_B:
        logger.info("Mirroring workspace into %s...", path_b)
        copy_tree(path_a, path_b)
    elif direction is MirrorDirection.B_TO_A:
        logger.info("Mirroring workspace into %s...", path_a)
        copy_tree(path_b, path_a)
    return direction
