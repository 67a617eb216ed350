"""Build artifacts and dependency caches inside development projects."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from mac_cleanup.core.trash import trash_items
from mac_cleanup.models.category import Category
from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem, ScanResult
from mac_cleanup.models.target import BuiltinCleaner, Target
from mac_cleanup.utils import default_workers, dir_info

log = logging.getLogger(__name__)

MAX_SCAN_DEPTH = 8
DEFAULT_STALE_DAYS = 7


@dataclass(frozen=True, slots=True)
class CachePattern:
    """A cache directory name and the files that prove its parent is a project."""

    dir_name: str
    marker_files: tuple[str, ...]


DEFAULT_PATTERNS: tuple[CachePattern, ...] = (
    CachePattern("node_modules", ("package.json",)),
    CachePattern(".venv", ("pyproject.toml", "requirements.txt", "setup.py", "setup.cfg", "Pipfile")),
    CachePattern(".tox", ("tox.ini", "pyproject.toml", "setup.cfg")),
    CachePattern(".mypy_cache", ("pyproject.toml", "mypy.ini", "setup.cfg")),
    CachePattern(".pytest_cache", ("pyproject.toml", "pytest.ini", "setup.cfg", "conftest.py")),
    CachePattern(".next", ("next.config.js", "next.config.mjs", "next.config.ts")),
    CachePattern("target", ("Cargo.toml",)),
    CachePattern("target", ("pom.xml",)),
    CachePattern(".gradle", ("build.gradle", "build.gradle.kts", "settings.gradle")),
)

# Top-level home directories that never contain projects worth scanning.
EXCLUDED_TOP_DIRS = frozenset({
    "Library", "Applications", ".Trash", "Music", "Movies", "Pictures", "Public",
    ".npm", ".nvm", ".yarn", ".pnpm", ".cargo", ".rustup", ".gradle", ".local",
    ".cache", ".docker", ".vscode", ".cursor", ".hyper_plugins", ".claude",
})


@dataclass(slots=True)
class _Found:
    path: str
    marker_dir: str
    modified_at: datetime


class ProjectCacheTarget(Target, BuiltinCleaner):
    """Walks a root directory looking for project cache directories.

    A directory counts only when its parent holds one of the pattern's
    marker files, so an unrelated folder named ``target`` is left alone.
    Matched directories are not descended into.  With ``stale_days`` > 0
    only caches untouched for that many days are reported; it defaults to
    the category's ``days_old`` or :data:`DEFAULT_STALE_DAYS`.
    """

    def __init__(
        self,
        category: Category,
        scan_root: str | None = None,
        stale_days: int | None = None,
        patterns: tuple[CachePattern, ...] = DEFAULT_PATTERNS,
        max_depth: int = MAX_SCAN_DEPTH,
    ) -> None:
        super().__init__(category)
        self.scan_root = scan_root if scan_root is not None else str(Path.home())
        if stale_days is None:
            stale_days = category.days_old or DEFAULT_STALE_DAYS
        self.stale_days = stale_days
        self.max_depth = max_depth
        self._patterns: dict[str, list[CachePattern]] = {}
        for pattern in patterns:
            self._patterns.setdefault(pattern.dir_name, []).append(pattern)

    def is_available(self) -> bool:
        return bool(self.scan_root) and os.path.isdir(self.scan_root)

    def scan(self) -> ScanResult:
        if not self.is_available():
            return ScanResult(category=self.category)

        found = self._walk()
        if self.stale_days > 0:
            cutoff = datetime.now() - timedelta(days=self.stale_days)
            found = [f for f in found if f.modified_at < cutoff]
        if not found:
            return ScanResult(category=self.category)

        with ThreadPoolExecutor(max_workers=min(len(found), default_workers())) as executor:
            items = list(executor.map(self._to_item, found))
        return ScanResult.from_items(self.category, items, largest_first=False)

    def clean(self, items: list[CleanableItem]) -> CleanResult:
        return trash_items(self.category, items)

    def _walk(self) -> list[_Found]:
        found: list[_Found] = []
        stack: list[tuple[str, int]] = [(self.scan_root, 0)]
        while stack:
            current, depth = stack.pop()
            child_depth = depth + 1
            if child_depth > self.max_depth:
                continue
            try:
                with os.scandir(current) as it:
                    entries = [e for e in it if e.is_dir(follow_symlinks=False)]
            except OSError as e:
                log.debug("Cannot read %s: %s", current, e)
                continue
            for entry in entries:
                if child_depth == 1 and entry.name in EXCLUDED_TOP_DIRS:
                    continue
                candidates = self._patterns.get(entry.name)
                if candidates is None:
                    stack.append((entry.path, child_depth))
                    continue
                # Cache-named directories are never descended into.
                match = self._match(current, candidates)
                if match is None:
                    continue
                try:
                    mtime = entry.stat(follow_symlinks=False).st_mtime
                except OSError as e:
                    log.debug("Cannot stat %s: %s", entry.path, e)
                    continue
                found.append(_Found(entry.path, match.dir_name, datetime.fromtimestamp(mtime)))
        return found

    @staticmethod
    def _match(parent: str, candidates: list[CachePattern]) -> CachePattern | None:
        for pattern in candidates:
            if any(os.path.exists(os.path.join(parent, m)) for m in pattern.marker_files):
                return pattern
        return None

    def _to_item(self, found: _Found) -> CleanableItem:
        size, count = dir_info(found.path)
        return CleanableItem(
            path=found.path,
            size=size,
            file_count=count,
            name=found.marker_dir,
            is_directory=True,
            modified_at=found.modified_at,
            display_name=os.path.relpath(found.path, self.scan_root),
        )
