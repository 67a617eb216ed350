"""Tests for the non-interactive runner."""

from __future__ import annotations

import pytest

from fakes import FakeBuiltinTarget, FakeTarget, items
from mac_cleanup.core.registry import TargetRegistry
from mac_cleanup.core.runner import Runner
from mac_cleanup.errors import (
    NilConfigError,
    NilUserConfigError,
    NoEligibleTargetsError,
    NoSelectionError,
)
from mac_cleanup.models.category import Config
from mac_cleanup.models.progress import CleanCallbacks
from mac_cleanup.userconfig import UserConfig


@pytest.fixture
def setup(make_category):
    categories = [
        make_category("caches", name="Caches"),
        make_category("docker", name="Docker", method="builtin"),
        make_category("backups", name="Backups", safety="risky"),
        make_category("guide", name="Guide", method="manual"),
        make_category("broken", name="Broken"),
    ]
    reg = TargetRegistry()
    reg.register(FakeTarget(categories[0], items=items(("/c1", 100), ("/c2", 50))))
    reg.register(FakeBuiltinTarget(categories[1], items=items(("docker:images", 1000))))
    reg.register(FakeTarget(categories[2], items=items(("/b1", 5000))))
    reg.register(FakeTarget(categories[3], items=items(("/g1", 1))))
    reg.register(FakeTarget(categories[4], error="permission denied"))
    return Config(categories=categories), reg


class TestRunnerConstruction:
    def test_requires_config(self):
        with pytest.raises(NilConfigError):
            Runner(None, UserConfig())

    def test_requires_user_config(self):
        with pytest.raises(NilUserConfigError):
            Runner(Config(), None)

    def test_builds_default_registry(self, make_category):
        runner = Runner(Config(categories=[make_category("logs", paths=["~/Library/Logs/*"])]), UserConfig())
        assert "logs" in runner.registry


class TestRunnerRun:
    def test_no_selection(self, setup):
        config, reg = setup
        with pytest.raises(NoSelectionError):
            Runner(config, UserConfig(), reg).run()

    def test_no_eligible_targets(self, setup, fake_trash):
        config, reg = setup
        with pytest.raises(NoEligibleTargetsError):
            Runner(config, UserConfig(), reg).run(target_ids=["backups", "guide", "nope"])
        assert fake_trash.calls == []
        assert reg.get("backups").scan_count == 0

    def test_cleans_saved_selection(self, setup, fake_trash):
        config, reg = setup
        user = UserConfig(selected_targets=["caches", "docker"])
        report, warnings = Runner(config, user, reg).run()

        assert warnings == []
        assert fake_trash.calls == [["/c1", "/c2"]]
        assert report.freed_space == 1150
        assert report.cleaned_items == 3
        assert report.failed_items == 0
        assert report.duration >= 0

    def test_target_ids_override_selection(self, setup, fake_trash):
        config, reg = setup
        user = UserConfig(selected_targets=["docker"])
        report, _ = Runner(config, user, reg).run(target_ids=["caches"])
        assert report.freed_space == 150
        assert reg.get("docker").scan_count == 0

    def test_risky_manual_and_unknown_skipped_with_warnings(self, setup, fake_trash):
        config, reg = setup
        report, warnings = Runner(config, UserConfig(), reg).run(
            target_ids=["caches", "backups", "guide", "nope"],
        )
        assert report.freed_space == 150
        assert reg.get("backups").scan_count == 0
        assert any("Backups" in w and "risky" in w for w in warnings)
        assert any("Guide" in w and "manual" in w for w in warnings)
        assert any("nope" in w for w in warnings)

    def test_scan_errors_become_warnings(self, setup, fake_trash):
        config, reg = setup
        report, warnings = Runner(config, UserConfig(), reg).run(target_ids=["caches", "broken"])
        assert report.failed_items == 0
        assert warnings == ["Broken: scan failed: permission denied"]

    def test_dry_run_touches_nothing(self, setup, fake_trash):
        config, reg = setup
        report, _ = Runner(config, UserConfig(), reg).run(dry_run=True, target_ids=["caches", "docker"])
        assert fake_trash.calls == []
        assert reg.get("docker").cleaned == []
        assert report.freed_space == 1150
        assert report.cleaned_items == 3

    def test_exclusions_respected(self, setup, fake_trash):
        config, reg = setup
        user = UserConfig(selected_targets=["caches"])
        user.set_excluded_paths("caches", ["/c1"])
        report, _ = Runner(config, user, reg).run()
        assert fake_trash.calls == [["/c2"]]
        assert report.freed_space == 50

    def test_failures_counted(self, setup, fake_trash):
        config, reg = setup
        fake_trash.failures["/c2"] = "busy"
        report, _ = Runner(config, UserConfig(), reg).run(target_ids=["caches"])
        assert report.failed_items == 1
        assert report.results[0].errors == ["/c2: busy"]

    def test_callbacks_forwarded(self, setup, fake_trash):
        config, reg = setup
        done = []
        Runner(config, UserConfig(), reg).run(
            target_ids=["caches"],
            callbacks=CleanCallbacks(on_category_done=done.append),
        )
        assert [e.category_name for e in done] == ["Caches"]
