"""Per-category cleaning by method."""

from __future__ import annotations

import logging
import os
import shutil

from mac_cleanup.core.registry import TargetRegistry
from mac_cleanup.core.sip import partition_protected
from mac_cleanup.core.trash import trash_items
from mac_cleanup.models.category import Category
from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem
from mac_cleanup.models.target import BuiltinCleaner

log = logging.getLogger(__name__)


class Executor:
    """Removes items according to their category's method."""

    def __init__(self, registry: TargetRegistry) -> None:
        self.registry = registry

    def clean(self, category: Category, items: list[CleanableItem]) -> CleanResult:
        result = CleanResult(category=category)
        match category.method:
            case "trash":
                return trash_items(category, items)
            case "permanent":
                self._remove_permanently(items, result)
            case "builtin":
                return self._clean_builtin(category, items)
            case "manual":
                result.skipped_items = len(items)
            case _:
                result.errors.append(f"unsupported method: {category.method}")
        return result

    def _remove_permanently(self, items: list[CleanableItem], result: CleanResult) -> None:
        allowed, result.skipped_items = partition_protected(items)
        for item in allowed:
            try:
                if item.is_directory:
                    shutil.rmtree(item.path)
                else:
                    os.remove(item.path)
            except OSError as e:
                result.errors.append(f"{item.path}: {e.strerror or e}")
                continue
            result.freed_space += item.size
            result.cleaned_items += 1

    def _clean_builtin(self, category: Category, items: list[CleanableItem]) -> CleanResult:
        target = self.registry.get(category.id)
        if target is None or not isinstance(target, BuiltinCleaner):
            return CleanResult(category=category, errors=[f"target not found: {category.id}"])
        try:
            return target.clean(items)
        except Exception as e:
            log.exception("Target '%s' failed during clean", category.id)
            return CleanResult(category=category, errors=[f"{category.id}: {e}"])
