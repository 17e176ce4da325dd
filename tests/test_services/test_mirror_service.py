"""Tests for the two-path workspace mirror."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bootstrap.services.mirror_service import MirrorDirection, plan_mirror, reconcile
from tests._tree_helpers import read_tree, write_tree

if TYPE_CHECKING:
    from pathlib import Path


def test_populated_a_is_copied_into_empty_b(tmp_path: Path) -> None:
    a = write_tree(tmp_path / "clawd", {"MEMORY.md": "m", "memory/2024-01-01.md": "day"})
    b = tmp_path / ".openclaw" / "workspace"

    assert reconcile(a, b) is MirrorDirection.A_TO_B
    assert read_tree(b) == read_tree(a)


def test_populated_b_is_copied_into_empty_a(tmp_path: Path) -> None:
    a = tmp_path / "clawd"
    a.mkdir()
    b = write_tree(tmp_path / "runtime", {"USER.md": "u", "assets/logo.svg": "<svg/>"})

    assert reconcile(a, b) is MirrorDirection.B_TO_A
    assert read_tree(a) == {"USER.md": "u", "assets/logo.svg": "<svg/>"}


def test_missing_a_is_created_from_b(tmp_path: Path) -> None:
    a = tmp_path / "clawd"
    b = write_tree(tmp_path / "runtime", {"USER.md": "u"})

    reconcile(a, b)

    assert read_tree(a) == {"USER.md": "u"}


def test_both_populated_are_left_alone(tmp_path: Path) -> None:
    a = write_tree(tmp_path / "a", {"MEMORY.md": "from a"})
    b = write_tree(tmp_path / "b", {"MEMORY.md": "from b", "extra.md": "x"})

    assert reconcile(a, b) is MirrorDirection.NONE
    assert read_tree(a) == {"MEMORY.md": "from a"}
    assert read_tree(b) == {"MEMORY.md": "from b", "extra.md": "x"}


def test_both_empty_is_a_no_op_but_creates_b(tmp_path: Path) -> None:
    a = tmp_path / "a"
    b = tmp_path / "b"

    assert reconcile(a, b) is MirrorDirection.NONE
    assert b.is_dir()
    assert not a.exists()


def test_hidden_files_count_as_content(tmp_path: Path) -> None:
    a = write_tree(tmp_path / "a", {".gitkeep": ""})
    assert plan_mirror(a, tmp_path / "b") is MirrorDirection.A_TO_B
