"""Tests for releaser.platform.files module."""

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from releaser.platform.files import atomic_write_bytes


def test_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "pom.xml"
    target.write_bytes(b"old")

    atomic_write_bytes(target, b"new")

    assert target.read_bytes() == b"new"


def test_creates_missing_file(tmp_path: Path) -> None:
    target = tmp_path / "README.md"

    atomic_write_bytes(target, b"hello")

    assert target.read_bytes() == b"hello"


def test_leaves_no_temp_files(tmp_path: Path) -> None:
    target = tmp_path / "README.md"
    target.write_bytes(b"a")

    atomic_write_bytes(target, b"b")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["README.md"]


@pytest.mark.skipif(sys.platform == "win32", reason="chmod doesn't work on Windows")
def test_keeps_permission_bits(tmp_path: Path) -> None:
    script = tmp_path / "run.sh"
    script.write_bytes(b"#!/bin/sh\necho 1.0.0\n")
    script.chmod(0o755)

    atomic_write_bytes(script, b"#!/bin/sh\necho 1.1.0\n")

    mode = stat.S_IMODE(os.stat(script).st_mode)
    assert mode == 0o755


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        atomic_write_bytes(tmp_path / "missing" / "file.md", b"x")
