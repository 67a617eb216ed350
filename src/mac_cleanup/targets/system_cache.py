"""Catch-all target for ~/Library/Caches style categories."""

from __future__ import annotations

import logging

from mac_cleanup.core.locks import get_locked_paths
from mac_cleanup.errors import LockCheckError
from mac_cleanup.models.category import Category
from mac_cleanup.models.scan_result import STATUS_PROCESS_LOCKED, ScanResult
from mac_cleanup.targets.path import PathTarget
from mac_cleanup.utils import expand_path, strip_glob_pattern

log = logging.getLogger(__name__)


def exclusion_prefix(pattern: str) -> str:
    """Turn another category's pattern into a directory prefix to exclude."""
    prefix = expand_path(pattern)
    for suffix in ("/**", "/*", "*"):
        prefix = prefix.removesuffix(suffix)
    if not prefix.endswith("/"):
        prefix += "/"
    return prefix


class SystemCacheTarget(PathTarget):
    """Path target that skips paths owned by more specific categories.

    Items whose files are held open by a running process are marked
    ``process-locked`` so the UI can leave them unselected.
    """

    def __init__(self, category: Category, all_categories: list[Category]) -> None:
        super().__init__(category)
        self.exclude_prefixes: list[str] = []
        for other in all_categories:
            if other.id == category.id:
                continue
            self.exclude_prefixes.extend(exclusion_prefix(p) for p in other.paths)

    def is_excluded(self, path: str) -> bool:
        candidate = path.rstrip("/") + "/"
        return any(candidate.startswith(prefix) for prefix in self.exclude_prefixes)

    def accepts(self, path: str) -> bool:
        return not self.is_excluded(path)

    def scan(self) -> ScanResult:
        result = super().scan()
        if result.items:
            self._mark_locked_items(result)
        return result

    def _mark_locked_items(self, result: ScanResult) -> None:
        base = next((b for b in map(strip_glob_pattern, self.category.paths) if b), "")
        try:
            locked = get_locked_paths(base)
        except LockCheckError as e:
            log.warning("Could not check open files under %s: %s", base, e)
            return
        for item in result.items:
            if item.path in locked:
                item.status = STATUS_PROCESS_LOCKED
