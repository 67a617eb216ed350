"""Downloads older than a configurable age."""

from __future__ import annotations

from mac_cleanup.core.trash import trash_items
from mac_cleanup.models.category import Category
from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem
from mac_cleanup.models.target import BuiltinCleaner
from mac_cleanup.targets.path import PathTarget

DEFAULT_DAYS_OLD = 30


class OldDownloadTarget(PathTarget, BuiltinCleaner):
    """Path target that only reports entries untouched for *days_old* days."""

    def __init__(self, category: Category, days_old: int = DEFAULT_DAYS_OLD) -> None:
        super().__init__(category)
        self.days_old = category.days_old or days_old

    def clean(self, items: list[CleanableItem]) -> CleanResult:
        return trash_items(self.category, items)
