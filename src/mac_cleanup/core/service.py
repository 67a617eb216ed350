"""Cleaning orchestration with progress reporting."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from mac_cleanup.core.executor import Executor
from mac_cleanup.core.registry import TargetRegistry
from mac_cleanup.core.trash import TRASH_BATCH_SIZE
from mac_cleanup.models.category import METHOD_MANUAL, Category
from mac_cleanup.models.clean_result import CleanResult, Report
from mac_cleanup.models.progress import CategoryCleaned, CleanCallbacks, CleanProgress, ItemCleaned
from mac_cleanup.models.scan_result import CleanableItem, ScanResult

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanJob:
    """Items of one category scheduled for cleaning."""

    category: Category
    items: list[CleanableItem] = field(default_factory=list)


class CleanService:
    """Turns scan results into jobs and runs them through the executor.

    Progress is reported as the run goes: ``on_progress`` with a running
    item counter, ``on_item_done`` per item for the trash and permanent
    methods, and ``on_category_done`` once per job.
    """

    def __init__(self, registry: TargetRegistry, executor: Executor | None = None) -> None:
        self.registry = registry
        self.executor = executor or Executor(registry)

    def prepare_jobs(
        self,
        result_map: dict[str, ScanResult],
        selected: dict[str, bool],
        excluded: dict[str, set[str]],
        order: list[str] | None = None,
    ) -> list[CleanJob]:
        """Build cleaning jobs from scan results.

        Categories are visited in *order* when given, otherwise in the
        order of *selected*.  Unselected, manual, missing and empty results
        are dropped, as are process-locked items and items whose path is in
        *excluded*.
        """
        ids = order if order else list(selected)
        jobs: list[CleanJob] = []
        seen: set[str] = set()
        for category_id in ids:
            if category_id in seen or not selected.get(category_id):
                continue
            seen.add(category_id)
            result = result_map.get(category_id)
            if result is None or not result.items:
                continue
            if result.category.method == METHOD_MANUAL:
                continue
            skip = excluded.get(category_id, set())
            items = [
                item for item in result.items
                if item.path not in skip and not item.is_locked
            ]
            if items:
                jobs.append(CleanJob(category=result.category, items=items))
        return jobs

    def clean(self, jobs: list[CleanJob], callbacks: CleanCallbacks | None = None) -> Report:
        """Run *jobs* in order and aggregate the results."""
        callbacks = callbacks or CleanCallbacks()
        started = time.monotonic()
        report = Report()
        total = sum(len(job.items) for job in jobs)
        current = 0

        for job in jobs:
            match job.category.method:
                case "builtin":
                    result, current = self._clean_builtin(job, current, total, callbacks)
                case "trash":
                    result, current = self._clean_trash_batched(job, current, total, callbacks)
                case "permanent":
                    result, current = self._clean_item_by_item(job, current, total, callbacks)
                case "manual":
                    result = self.executor.clean(job.category, job.items)
                    current += len(job.items)
                case _:
                    result = CleanResult(
                        category=job.category,
                        errors=[f"unsupported method: {job.category.method}"],
                    )

            report.add(result)
            log.info(
                "Cleaned %s: %d items, %d bytes, %d errors",
                job.category.id, result.cleaned_items, result.freed_space, len(result.errors),
            )
            if callbacks.on_category_done:
                callbacks.on_category_done(CategoryCleaned(
                    category_name=job.category.name,
                    freed_space=result.freed_space,
                    cleaned_items=result.cleaned_items,
                    error_count=len(result.errors),
                ))

        report.duration = time.monotonic() - started
        return report

    def _clean_builtin(
        self, job: CleanJob, current: int, total: int, callbacks: CleanCallbacks
    ) -> tuple[CleanResult, int]:
        _progress(callbacks, job.category.name, "", current, total)
        result = self.executor.clean(job.category, job.items)
        return result, current + len(job.items)

    def _clean_trash_batched(
        self, job: CleanJob, current: int, total: int, callbacks: CleanCallbacks
    ) -> tuple[CleanResult, int]:
        result = CleanResult(category=job.category)
        for start in range(0, len(job.items), TRASH_BATCH_SIZE):
            batch = job.items[start:start + TRASH_BATCH_SIZE]
            _progress(callbacks, job.category.name, batch[0].label, current, total)
            batch_result = self.executor.clean(job.category, batch)
            result.merge(batch_result)
            if callbacks.on_item_done:
                failures = _errors_by_path(batch, batch_result.errors)
                for item in batch:
                    err = failures.get(item.path)
                    callbacks.on_item_done(ItemCleaned(
                        path=item.path,
                        name=item.label,
                        size=item.size,
                        success=err is None,
                        err_msg=err or "",
                    ))
            current += len(batch)
            _progress(callbacks, job.category.name, batch[-1].label, current, total)
        return result, current

    def _clean_item_by_item(
        self, job: CleanJob, current: int, total: int, callbacks: CleanCallbacks
    ) -> tuple[CleanResult, int]:
        result = CleanResult(category=job.category)
        for item in job.items:
            current += 1
            _progress(callbacks, job.category.name, item.label, current, total)
            item_result = self.executor.clean(job.category, [item])
            result.merge(item_result)
            if callbacks.on_item_done:
                err = item_result.errors[0] if item_result.errors else ""
                callbacks.on_item_done(ItemCleaned(
                    path=item.path,
                    name=item.label,
                    size=item.size,
                    success=not item_result.errors,
                    err_msg=err,
                ))
        return result, current


def _progress(
    callbacks: CleanCallbacks, category_name: str, item: str, current: int, total: int
) -> None:
    if callbacks.on_progress:
        callbacks.on_progress(CleanProgress(
            category_name=category_name,
            current_item=item,
            current=current,
            total=total,
        ))


def _errors_by_path(items: list[CleanableItem], errors: list[str]) -> dict[str, str]:
    """Map ``"<path>: <reason>"`` errors back to their items as reasons.

    The longest matching path wins so ``/a/b`` is not credited to ``/a``.
    """
    paths = sorted((item.path for item in items), key=len, reverse=True)
    failures: dict[str, str] = {}
    for err in errors:
        for path in paths:
            if err.startswith(path + ":"):
                failures.setdefault(path, err[len(path) + 1:].strip())
                break
    return failures
