"""Tests for the generic glob-driven target."""

from __future__ import annotations

import os
import time

import pytest

from mac_cleanup.targets.path import PathTarget


def _age(path, days):
    stamp = time.time() - days * 86400
    os.utime(path, (stamp, stamp))


@pytest.fixture
def caches(isolate_home):
    root = isolate_home / "Library" / "Caches"
    root.mkdir(parents=True)
    (root / "small").mkdir()
    (root / "small" / "a.bin").write_bytes(b"x" * 100)
    (root / "big").mkdir()
    (root / "big" / "b.bin").write_bytes(b"x" * 1000)
    (root / "big" / "c.bin").write_bytes(b"x" * 500)
    (root / "loose.txt").write_bytes(b"x" * 10)
    return root


class TestPathTarget:
    def test_scan_reports_each_match(self, caches, make_category):
        target = PathTarget(make_category(paths=["~/Library/Caches/*"]))
        result = target.scan()

        assert [i.path for i in result.items] == [
            str(caches / "big"), str(caches / "small"), str(caches / "loose.txt"),
        ]
        assert result.total_size == 1610
        assert result.total_file_count == 4
        big = result.items[0]
        assert big.is_directory
        assert big.name == "big"
        assert big.file_count == 2
        assert big.modified_at is not None

    def test_unavailable_without_matches(self, isolate_home, make_category):
        target = PathTarget(make_category(paths=["~/Nothing/*"]))
        assert not target.is_available()
        assert target.scan().items == []

    def test_check_cmd_controls_availability(self, caches, make_category, monkeypatch):
        monkeypatch.setattr("mac_cleanup.targets.path.command_exists", lambda name: False)
        target = PathTarget(make_category(paths=["~/Library/Caches/*"], check_cmd="npm"))
        assert not target.is_available()
        assert target.scan().items == []

        monkeypatch.setattr("mac_cleanup.targets.path.command_exists", lambda name: name == "npm")
        assert target.is_available()
        assert len(target.scan().items) == 3

    def test_overlapping_patterns_are_deduplicated(self, caches, make_category):
        target = PathTarget(make_category(paths=["~/Library/Caches/*", "~/Library/Caches/big"]))
        paths = [i.path for i in target.scan().items]
        assert len(paths) == len(set(paths)) == 3

    def test_days_old_filter(self, caches, make_category):
        _age(caches / "big", 40)
        _age(caches / "small", 2)
        _age(caches / "loose.txt", 40)
        target = PathTarget(make_category(paths=["~/Library/Caches/*"], days_old=30))
        assert sorted(i.name for i in target.scan().items) == ["big", "loose.txt"]

    def test_sip_paths_skipped(self, make_category):
        target = PathTarget(make_category(paths=["/usr/lib"]))
        assert target.is_available()
        assert target.scan().items == []
