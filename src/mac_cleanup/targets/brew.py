"""Homebrew download cache target."""

from __future__ import annotations

import logging
import os
import subprocess

from mac_cleanup.core.trash import trash_items
from mac_cleanup.models.category import Category
from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem, ScanResult
from mac_cleanup.models.target import BuiltinCleaner, Target
from mac_cleanup.utils import command_exists, dir_info, run_command

log = logging.getLogger(__name__)

BREW_TIMEOUT = 120


class BrewTarget(Target, BuiltinCleaner):
    """Reports the directory printed by ``brew --cache`` as one item.

    Cleaning first lets ``brew cleanup`` prune what it knows about, then
    trashes whatever is left of the cache directory.
    """

    def __init__(self, category: Category) -> None:
        super().__init__(category)
        self._cache_path: str | None = None

    def is_available(self) -> bool:
        return command_exists("brew")

    def cache_path(self) -> str:
        """Path of the Homebrew cache, or ``""`` if it cannot be determined."""
        if self._cache_path is None:
            try:
                proc = run_command(["brew", "--cache"], timeout=BREW_TIMEOUT)
            except (OSError, subprocess.SubprocessError) as e:
                log.warning("Could not query Homebrew cache: %s", e)
                return ""
            if proc.returncode != 0:
                log.warning("brew --cache failed: %s", proc.stderr.strip())
                return ""
            self._cache_path = proc.stdout.strip()
        return self._cache_path

    def scan(self) -> ScanResult:
        result = ScanResult(category=self.category)
        if not self.is_available():
            return result
        path = self.cache_path()
        if not path or not os.path.isdir(path):
            return result
        size, count = dir_info(path)
        if size > 0:
            result.add(CleanableItem(
                path=path,
                size=size,
                file_count=count,
                name="Homebrew Cache",
                is_directory=True,
            ))
        return result

    def clean(self, items: list[CleanableItem]) -> CleanResult:
        if not items:
            return CleanResult(category=self.category)

        try:
            proc = run_command(["brew", "cleanup", "--prune=all", "-s"], timeout=BREW_TIMEOUT)
            if proc.returncode != 0:
                log.warning("brew cleanup failed: %s", proc.stderr.strip())
        except (OSError, subprocess.SubprocessError) as e:
            log.warning("brew cleanup failed: %s", e)

        cache = self.cache_path()
        return trash_items(self.category, items, validate=lambda item: self._validate(cache, item))

    @staticmethod
    def _validate(cache: str, item: CleanableItem) -> str | None:
        root = cache.rstrip("/")
        if cache and (item.path == root or item.path.startswith(root + "/")):
            return None
        return f"invalid path: {item.path}"
