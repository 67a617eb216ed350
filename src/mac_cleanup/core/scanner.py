"""Parallel scanning of registered targets."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from mac_cleanup.core.registry import TargetRegistry
from mac_cleanup.models.scan_result import ScanResult
from mac_cleanup.models.target import Target

log = logging.getLogger(__name__)

ResultCallback = Callable[[ScanResult], None]

MAX_SCAN_WORKERS = 4


class ScanPipeline:
    """Scans targets concurrently and collects one result per category."""

    def __init__(self, registry: TargetRegistry) -> None:
        self.registry = registry
        self._last_scan: dict[str, ScanResult] = {}

    def scan(
        self,
        target_ids: list[str] | None = None,
        on_result: ResultCallback | None = None,
    ) -> dict[str, ScanResult]:
        """Scan the given targets (all available ones when None).

        A target that raises does not abort the scan; its result carries
        the error message instead.

        Args:
            target_ids: Specific category IDs to scan.
            on_result: Optional callback fired as each target finishes.
                May be called from worker threads.

        Returns:
            Mapping of category ID to scan result.
        """
        targets = self._resolve_targets(target_ids)
        results: dict[str, ScanResult] = {}
        if not targets:
            return results

        lock = threading.Lock()

        def _scan_target(target: Target) -> None:
            result = self._scan_one(target)
            with lock:
                results[target.id] = result
                self._last_scan[target.id] = result
            if on_result:
                on_result(result)

        if (os.cpu_count() or 1) > 1 and len(targets) > 1:
            max_workers = min(MAX_SCAN_WORKERS, len(targets))
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [executor.submit(_scan_target, t) for t in targets]
                for future in futures:
                    future.result()
        else:
            for target in targets:
                _scan_target(target)

        return results

    def last_scan(self, category_id: str) -> ScanResult | None:
        """Most recent result for a category, if it was scanned."""
        return self._last_scan.get(category_id)

    @staticmethod
    def _scan_one(target: Target) -> ScanResult:
        try:
            result = target.scan()
        except Exception as e:
            log.exception("Target '%s' failed during scan", target.id)
            return ScanResult(category=target.category, error=str(e) or type(e).__name__)
        log.info(
            "Scanned %s: %d items, %d bytes", target.id, len(result.items), result.total_size,
        )
        return result

    def _resolve_targets(self, target_ids: list[str] | None) -> list[Target]:
        if target_ids is None:
            return self.registry.available()
        targets = []
        for category_id in target_ids:
            target = self.registry.get(category_id)
            if target is None:
                log.warning("Target '%s' not found, skipping", category_id)
                continue
            targets.append(target)
        return targets
