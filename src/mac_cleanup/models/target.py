"""Base target interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mac_cleanup.models.category import Category
from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem, ScanResult


class Target(ABC):
    """Runtime object that scans one catalog category.

    Every target must implement this interface to take part in scanning.
    """

    def __init__(self, category: Category) -> None:
        self._category = category

    @property
    def category(self) -> Category:
        return self._category

    @property
    def id(self) -> str:
        return self._category.id

    @abstractmethod
    def is_available(self) -> bool:
        """Whether scanning this category is meaningful on this machine."""

    @abstractmethod
    def scan(self) -> ScanResult:
        """Scan for cleanable items. MUST NOT delete anything."""


class BuiltinCleaner(ABC):
    """Capability of targets that perform their own cleanup.

    Implemented by the targets behind ``method: builtin`` categories, where
    moving paths to the Trash is not the right way to reclaim space
    (e.g. pruning Docker resources).
    """

    @abstractmethod
    def clean(self, items: list[CleanableItem]) -> CleanResult:
        """Remove *items* and report what happened."""
