from __future__ import annotations

import os
from pathlib import Path

import pytest

from autocommit.config import DEFAULT_IGNORE_PATTERNS, DEFAULT_TRACK_EXTENSIONS
from autocommit.ledger.scanner import (
    ExactSegment,
    PrefixWildcard,
    Scanner,
    SuffixWildcard,
    categorize_file,
    compile_pattern,
    scan_directory,
    should_ignore,
)
from autocommit.ledger.util import short_hash
from autocommit.models import FileCategory


@pytest.mark.parametrize(
    "path,expected",
    [
        ("scenes/main.tscn", FileCategory.SCENE),
        ("player.gd", FileCategory.SCRIPT),
        ("theme.tres", FileCategory.RESOURCE),
        ("water.gdshader", FileCategory.SHADER),
        ("common.gdshaderinc", FileCategory.SHADER),
        ("icon.PNG", FileCategory.ASSET),
        ("fonts/main.ttf", FileCategory.ASSET),
        ("sfx/jump.ogg", FileCategory.AUDIO),
        ("project.godot", FileCategory.CONFIG),
        ("README.md", FileCategory.CONFIG),
        ("Makefile", FileCategory.UNKNOWN),
        ("data.bin", FileCategory.UNKNOWN),
    ],
)
def test_categorize_file(path: str, expected: FileCategory) -> None:
    assert categorize_file(path) == expected


def test_compile_pattern_variants() -> None:
    assert compile_pattern("*.tmp") == SuffixWildcard(".tmp")
    assert compile_pattern("~*") == PrefixWildcard("~")
    assert compile_pattern("node_modules") == ExactSegment("node_modules")
    assert compile_pattern("*") == ExactSegment("*")


def test_should_ignore_matches_any_segment() -> None:
    patterns = list(DEFAULT_IGNORE_PATTERNS)
    assert should_ignore(".git/HEAD", patterns)
    assert should_ignore("addons/node_modules/x/index.json", patterns)
    assert should_ignore("scenes/level.tscn.tmp", patterns)
    assert should_ignore("~lock.gd", patterns)
    assert should_ignore("scenes/~draft/level.tscn", patterns)
    assert not should_ignore("scenes/level.tscn", patterns)
    assert not should_ignore("git/notes.md", patterns)


def test_should_ignore_exact_segment_does_not_match_substrings() -> None:
    assert not should_ignore("my_node_modules_notes.md", ["node_modules"])
    assert not should_ignore("icon.png.import", [".import"])
    assert should_ignore(".import/icon.png", [".import"])


def test_scan_missing_root_returns_empty(tmp_path: Path) -> None:
    assert Scanner([], []).scan(tmp_path / "missing") == []


def test_scan_hashes_and_categorizes(project: Path, write) -> None:
    write("player.gd", "extends Node\n")
    write("scenes/main.tscn", "[gd_scene]\n")

    files = scan_directory(project, DEFAULT_IGNORE_PATTERNS, DEFAULT_TRACK_EXTENSIONS)

    assert [f.path for f in files] == ["player.gd", "scenes/main.tscn"]
    player = files[0]
    assert player.hash == short_hash(b"extends Node\n")
    assert len(player.hash) == 12
    assert player.size == len(b"extends Node\n")
    assert player.category == FileCategory.SCRIPT
    assert player.last_modified > 0
    assert files[1].category == FileCategory.SCENE


def test_scan_skips_ignored_directories_and_untracked_extensions(project: Path, write) -> None:
    write("player.gd", "extends Node\n")
    write(".godot/editor/cache.cfg", "x")
    write(".autocommit/state.json", "{}")
    write("node_modules/pkg/readme.md", "x")
    write("build/output.exe", "binary")
    write("notes.txt.bak", "x")

    files = Scanner(DEFAULT_IGNORE_PATTERNS, DEFAULT_TRACK_EXTENSIONS).scan(project)

    assert [f.path for f in files] == ["player.gd"]


def test_scan_is_deterministic(project: Path, write) -> None:
    for name in ("b.gd", "a.gd", "sub/c.gd", "sub/a.gd"):
        write(name, name)
    scanner = Scanner([], [".gd"])

    first = scanner.scan(project)
    second = scanner.scan(project)

    assert first == second
    assert [f.path for f in first] == sorted(f.path for f in first)


def test_scan_orders_by_full_relative_path(project: Path, write) -> None:
    write("a/b.gd", "x")
    write("a.gd", "y")
    write("a_c.gd", "z")

    files = Scanner([], [".gd"]).scan(project)

    assert [f.path for f in files] == ["a.gd", "a/b.gd", "a_c.gd"]


def test_empty_extension_list_tracks_everything(project: Path, write) -> None:
    write("Makefile", "all:\n")
    write("data.bin", "x")

    files = Scanner([], []).scan(project)

    assert {f.path for f in files} == {"Makefile", "data.bin"}
    assert all(f.category == FileCategory.UNKNOWN for f in files)


def test_extension_matching_is_case_insensitive(project: Path, write) -> None:
    write("Icon.PNG", "png")
    files = Scanner([], [".png"]).scan(project)
    assert [f.path for f in files] == ["Icon.PNG"]


def test_scan_does_not_follow_symlinked_directories(project: Path, write, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.gd").write_text("x", encoding="utf-8")
    write("main.gd", "x")
    try:
        (project / "linked").symlink_to(outside, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    files = Scanner([], [".gd"]).scan(project)

    assert [f.path for f in files] == ["main.gd"]


needs_permissions = pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="file permissions are not enforced for this user",
)


@needs_permissions
def test_scan_skips_unreadable_files(project: Path, write) -> None:
    write("main.gd", "x")
    locked = write("locked.gd", "y")
    locked.chmod(0)
    try:
        files = Scanner([], [".gd"]).scan(project)
    finally:
        locked.chmod(0o644)

    assert [f.path for f in files] == ["main.gd"]


@needs_permissions
def test_scan_skips_unreadable_directories(project: Path, write) -> None:
    write("main.gd", "x")
    write("private/secret.gd", "y")
    private = project / "private"
    private.chmod(0)
    try:
        files = Scanner([], [".gd"]).scan(project)
    finally:
        private.chmod(0o755)

    assert [f.path for f in files] == ["main.gd"]
