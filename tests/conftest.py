"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from mac_cleanup.core.trash import TrashBatchResult
from mac_cleanup.models.category import Category


@pytest.fixture(autouse=True)
def isolate_home(tmp_path, monkeypatch):
    """Point HOME and XDG_CONFIG_HOME at temp directories."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("DEBUG", raising=False)
    return home


@pytest.fixture
def make_category():
    """Factory for categories with test-friendly defaults."""

    def _make(category_id: str = "cat1", **kwargs) -> Category:
        kwargs.setdefault("name", "Test")
        if "paths" in kwargs:
            kwargs["paths"] = tuple(kwargs["paths"])
        return Category(id=category_id, **kwargs)

    return _make


@dataclass
class FakeTrash:
    """Records batch Trash requests; fails the paths listed in ``failures``."""

    failures: dict[str, str] = field(default_factory=dict)
    calls: list[list[str]] = field(default_factory=list)

    def __call__(self, paths: list[str]) -> TrashBatchResult:
        self.calls.append(list(paths))
        result = TrashBatchResult()
        for path in paths:
            if path in self.failures:
                result.failed[path] = self.failures[path]
            else:
                result.succeeded.append(path)
        return result

    @property
    def trashed(self) -> list[str]:
        return [p for call in self.calls for p in call if p not in self.failures]


@pytest.fixture
def fake_trash(monkeypatch):
    """Replace the Finder batch Trash request everywhere it is used."""
    fake = FakeTrash()
    monkeypatch.setattr("mac_cleanup.core.trash.move_to_trash_batch", fake)
    return fake
