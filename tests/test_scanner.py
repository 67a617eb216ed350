"""Tests for the scan pipeline."""

from __future__ import annotations

import threading
import time

import pytest

from fakes import FakeTarget, items
from mac_cleanup.core.registry import TargetRegistry
from mac_cleanup.core.scanner import ScanPipeline


class SlowTarget(FakeTarget):
    def scan(self):
        time.sleep(0.05)
        return super().scan()


@pytest.fixture
def registry(make_category):
    reg = TargetRegistry()
    reg.register(FakeTarget(make_category("alpha"), items=items(("/a", 10))))
    reg.register(FakeTarget(make_category("beta"), items=items(("/b", 20), ("/c", 5))))
    reg.register(FakeTarget(make_category("off"), available=False))
    return reg


class TestScanPipeline:
    def test_scans_all_available(self, registry):
        results = ScanPipeline(registry).scan()
        assert set(results) == {"alpha", "beta"}
        assert results["beta"].total_size == 25

    def test_specific_targets(self, registry):
        results = ScanPipeline(registry).scan(["beta", "unknown"])
        assert list(results) == ["beta"]

    def test_explicit_ids_scan_unavailable_targets_too(self, registry):
        results = ScanPipeline(registry).scan(["off"])
        assert results["off"].items == []

    def test_failure_is_captured(self, registry, make_category):
        registry.register(FakeTarget(make_category("bad"), fail=True))
        results = ScanPipeline(registry).scan()
        assert results["bad"].error == "scan failed"
        assert results["bad"].items == []
        assert results["alpha"].error == ""

    def test_on_result_called_once_per_target(self, registry):
        seen = []
        lock = threading.Lock()

        def on_result(result):
            with lock:
                seen.append(result.category.id)

        ScanPipeline(registry).scan(on_result=on_result)
        assert sorted(seen) == ["alpha", "beta"]

    def test_last_scan(self, registry):
        pipeline = ScanPipeline(registry)
        pipeline.scan(["alpha"])
        assert pipeline.last_scan("alpha").total_size == 10
        assert pipeline.last_scan("beta") is None

    def test_many_targets_concurrently(self, make_category):
        reg = TargetRegistry()
        for i in range(8):
            reg.register(SlowTarget(make_category(f"t{i}"), items=items((f"/p{i}", i))))
        results = ScanPipeline(reg).scan()
        assert len(results) == 8
        assert all(results[f"t{i}"].total_size == i for i in range(8))

    def test_nothing_to_scan(self):
        assert ScanPipeline(TargetRegistry()).scan() == {}
