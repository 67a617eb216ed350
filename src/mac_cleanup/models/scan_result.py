"""Scan result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from mac_cleanup.models.category import Category

STATUS_AVAILABLE = "available"
STATUS_PROCESS_LOCKED = "process-locked"


@dataclass(slots=True)
class CleanableItem:
    """Single file, directory or synthetic resource that can be cleaned.

    ``path`` is an absolute filesystem path, or a synthetic identifier such
    as ``docker:images`` for resources that only a builtin target knows how
    to remove.
    """

    path: str
    size: int
    file_count: int = 1
    name: str = ""
    is_directory: bool = False
    modified_at: datetime | None = None
    status: str = STATUS_AVAILABLE
    display_name: str = ""

    @property
    def is_locked(self) -> bool:
        return self.status == STATUS_PROCESS_LOCKED

    @property
    def label(self) -> str:
        """Name shown to the user."""
        return self.display_name or self.name or self.path


@dataclass(slots=True)
class ScanResult:
    """Result of scanning one category.

    ``total_size`` and ``total_file_count`` always equal the sums over
    ``items``; use :meth:`add` or :meth:`from_items` to keep them in sync.
    """

    category: Category
    items: list[CleanableItem] = field(default_factory=list)
    total_size: int = 0
    total_file_count: int = 0
    error: str = ""

    @classmethod
    def from_items(
        cls,
        category: Category,
        items: list[CleanableItem],
        *,
        largest_first: bool = True,
    ) -> ScanResult:
        """Build a result from *items*, computing totals.

        Items are ordered largest-first (ties broken by path) unless
        *largest_first* is False, in which case they are ordered by path.
        """
        if largest_first:
            ordered = sorted(items, key=lambda i: (-i.size, i.path))
        else:
            ordered = sorted(items, key=lambda i: i.path)
        result = cls(category=category)
        for item in ordered:
            result.add(item)
        return result

    def add(self, item: CleanableItem) -> None:
        """Append an item and update the totals."""
        self.items.append(item)
        self.total_size += item.size
        self.total_file_count += item.file_count

    @property
    def is_empty(self) -> bool:
        return not self.items
