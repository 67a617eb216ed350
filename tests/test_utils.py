"""Tests for the shared helpers."""

from __future__ import annotations

import os
from datetime import datetime

import pytest

from mac_cleanup import utils
from mac_cleanup.utils import (
    bytes_to_human,
    check_full_disk_access,
    command_exists,
    default_workers,
    dir_info,
    expand_path,
    format_elapsed,
    glob_paths,
    path_info,
    strip_glob_pattern,
)


class TestExpandPath:
    def test_tilde(self, isolate_home):
        assert expand_path("~") == str(isolate_home)
        assert expand_path("~/Library") == f"{isolate_home}/Library"

    def test_absolute_untouched(self):
        assert expand_path("/tmp/x") == "/tmp/x"
        assert expand_path("~other/x") == "~other/x"


class TestGlobPaths:
    def test_star_includes_hidden(self, isolate_home):
        caches = isolate_home / "Library" / "Caches"
        caches.mkdir(parents=True)
        (caches / "visible").mkdir()
        (caches / ".hidden").mkdir()
        matches = glob_paths("~/Library/Caches/*")
        assert matches == [str(caches / ".hidden"), str(caches / "visible")]

    def test_literal_path(self, isolate_home):
        (isolate_home / ".npm").mkdir()
        assert glob_paths("~/.npm") == [str(isolate_home / ".npm")]
        assert glob_paths("~/.missing") == []

    def test_double_star(self, tmp_path):
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "a" / "b" / "x.log").write_text("x")
        assert str(tmp_path / "a" / "b" / "x.log") in glob_paths(f"{tmp_path}/**/*.log")


class TestStripGlobPattern:
    @pytest.mark.parametrize("pattern,expected", [
        ("~/Library/Caches/*", "~/Library/Caches"),
        ("~/Library/Caches/**", "~/Library/Caches"),
        ("/var/log/*.log", "/var/log"),
        ("~/.npm", "~/.npm"),
        ("/*", "/"),
        ("*", ""),
    ])
    def test_prefix(self, pattern, expected):
        assert strip_glob_pattern(pattern) == expected


class TestDirInfo:
    def test_counts_nested_files(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "a.bin").write_bytes(b"x" * 100)
        (tmp_path / "sub" / "b.bin").write_bytes(b"y" * 50)
        assert dir_info(tmp_path) == (150, 2)

    def test_does_not_follow_symlinks(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "big.bin").write_bytes(b"x" * 4096)
        inside = tmp_path / "inside"
        inside.mkdir()
        (inside / "link").symlink_to(outside)
        size, count = dir_info(inside)
        assert count == 1
        assert size < 4096

    def test_missing_directory(self, tmp_path):
        assert dir_info(tmp_path / "missing") == (0, 0)


class TestPathInfo:
    def test_file(self, tmp_path):
        f = tmp_path / "f.txt"
        f.write_bytes(b"x" * 10)
        size, count, is_dir, modified = path_info(str(f))
        assert (size, count, is_dir) == (10, 1, False)
        assert isinstance(modified, datetime)

    def test_directory(self, tmp_path):
        (tmp_path / "d").mkdir()
        (tmp_path / "d" / "f").write_bytes(b"x" * 7)
        size, count, is_dir, _ = path_info(str(tmp_path / "d"))
        assert (size, count, is_dir) == (7, 1, True)

    def test_missing_raises(self, tmp_path):
        with pytest.raises(OSError):
            path_info(str(tmp_path / "missing"))


class TestCommandExists:
    def test_uses_which(self, monkeypatch):
        monkeypatch.setattr(utils.shutil, "which", lambda name: "/bin/x" if name == "brew" else None)
        assert command_exists("brew")
        assert not command_exists("docker")


def test_default_workers_bounds(monkeypatch):
    monkeypatch.setattr(os, "cpu_count", lambda: 64)
    assert default_workers() == 16
    monkeypatch.setattr(os, "cpu_count", lambda: None)
    assert default_workers() == 1


class TestFormatting:
    def test_bytes_to_human(self):
        assert bytes_to_human(0) == "0 B"
        assert bytes_to_human(600) == "600 B"
        assert bytes_to_human(1536) == "1.5 KB"
        assert bytes_to_human(5 * 1024 ** 3) == "5.0 GB"

    def test_format_elapsed(self):
        assert format_elapsed(0.25) == "250 ms"
        assert format_elapsed(12.34) == "12.3s"
        assert format_elapsed(125) == "2m 5s"


class TestFullDiskAccess:
    def test_no_trash_directory(self, isolate_home):
        assert check_full_disk_access()

    def test_readable_trash(self, isolate_home):
        (isolate_home / ".Trash").mkdir()
        assert check_full_disk_access()

    def test_denied(self, isolate_home, monkeypatch):
        (isolate_home / ".Trash").mkdir()

        def deny(path):
            raise PermissionError(1, "Operation not permitted", path)

        monkeypatch.setattr(utils.os, "listdir", deny)
        assert not check_full_disk_access()
