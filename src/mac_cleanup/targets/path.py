"""Generic target that scans the glob patterns of a category."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta

from mac_cleanup.core.sip import is_sip_protected
from mac_cleanup.models.category import Category
from mac_cleanup.models.scan_result import CleanableItem, ScanResult
from mac_cleanup.models.target import Target
from mac_cleanup.utils import command_exists, default_workers, glob_paths, path_info

log = logging.getLogger(__name__)

# Sizing is I/O bound; keep a few workers even on small machines.
MIN_SCAN_WORKERS = 4


class PathTarget(Target):
    """Reports every existing path matched by the category's patterns."""

    def __init__(self, category: Category) -> None:
        super().__init__(category)
        self.days_old = category.days_old

    def is_available(self) -> bool:
        if self.category.check_cmd:
            return command_exists(self.category.check_cmd)
        return any(glob_paths(pattern) for pattern in self.category.paths)

    def scan(self) -> ScanResult:
        if not self.is_available():
            return ScanResult(category=self.category)
        paths = self._collect_paths()
        items = self._scan_paths(paths)
        if self.days_old > 0:
            cutoff = datetime.now() - timedelta(days=self.days_old)
            items = [i for i in items if i.modified_at is not None and i.modified_at < cutoff]
        return ScanResult.from_items(self.category, items)

    def accepts(self, path: str) -> bool:
        """Hook for subclasses to drop matched paths before sizing."""
        return True

    def _collect_paths(self) -> list[str]:
        seen: set[str] = set()
        paths: list[str] = []
        for pattern in self.category.paths:
            for path in glob_paths(pattern):
                if path in seen:
                    continue
                seen.add(path)
                if is_sip_protected(path):
                    log.debug("Skipping SIP-protected path %s", path)
                    continue
                if self.accepts(path):
                    paths.append(path)
        return paths

    def _scan_paths(self, paths: list[str]) -> list[CleanableItem]:
        if not paths:
            return []
        workers = min(len(paths), max(MIN_SCAN_WORKERS, default_workers()))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            items = list(executor.map(self._scan_path, paths))
        return [item for item in items if item is not None]

    def _scan_path(self, path: str) -> CleanableItem | None:
        try:
            size, count, is_dir, modified = path_info(path)
        except OSError as e:
            log.debug("Cannot stat %s: %s", path, e)
            return None
        return CleanableItem(
            path=path,
            size=size,
            file_count=count,
            name=path.rstrip("/").rsplit("/", 1)[-1],
            is_directory=is_dir,
            modified_at=modified,
        )
