"""Non-interactive cleanup run."""

from __future__ import annotations

import logging
import time

from mac_cleanup.core.registry import TargetRegistry, default_registry
from mac_cleanup.core.scanner import ScanPipeline
from mac_cleanup.core.service import CleanJob, CleanService
from mac_cleanup.errors import (
    NilConfigError,
    NilUserConfigError,
    NoEligibleTargetsError,
    NoSelectionError,
)
from mac_cleanup.models.category import SAFETY_RISKY, Config
from mac_cleanup.models.clean_result import CleanResult, Report
from mac_cleanup.models.progress import CleanCallbacks
from mac_cleanup.userconfig import UserConfig

log = logging.getLogger(__name__)


class Runner:
    """Scans the selected targets and cleans them in one pass.

    Risky and manual categories are never cleaned here; they are skipped
    with a warning.  All input errors are raised before anything is
    scanned or removed.
    """

    def __init__(
        self,
        config: Config | None,
        user_config: UserConfig | None,
        registry: TargetRegistry | None = None,
    ) -> None:
        if config is None:
            raise NilConfigError()
        if user_config is None:
            raise NilUserConfigError()
        self.config = config
        self.user_config = user_config
        self.registry = registry if registry is not None else default_registry(config)
        self.service = CleanService(self.registry)

    def run(
        self,
        dry_run: bool = False,
        target_ids: list[str] | None = None,
        callbacks: CleanCallbacks | None = None,
    ) -> tuple[Report, list[str]]:
        """Clean *target_ids* (the saved selection when empty).

        Returns the report and a list of warnings.  With *dry_run* the
        report describes what would be freed and nothing is touched.
        """
        started = time.monotonic()
        requested = list(target_ids) if target_ids else self.user_config.get_selected_targets()
        if not requested:
            raise NoSelectionError()

        warnings: list[str] = []
        eligible = self._eligible_ids(requested, warnings)
        if not eligible:
            raise NoEligibleTargetsError()

        results = ScanPipeline(self.registry).scan(eligible)
        for category_id in eligible:
            result = results.get(category_id)
            if result is not None and result.error:
                warnings.append(f"{result.category.name}: scan failed: {result.error}")

        jobs = self.service.prepare_jobs(
            results,
            {category_id: True for category_id in eligible},
            self.user_config.excluded_paths_map(),
            eligible,
        )
        if dry_run:
            report = self._dry_run_report(jobs)
        else:
            report = self.service.clean(jobs, callbacks)
        report.duration = time.monotonic() - started

        for warning in warnings:
            log.info("Runner warning: %s", warning)
        return report, warnings

    def _eligible_ids(self, requested: list[str], warnings: list[str]) -> list[str]:
        eligible: list[str] = []
        for category_id in dict.fromkeys(requested):
            cat = self.config.category(category_id)
            if cat is None or category_id not in self.registry:
                warnings.append(f"{category_id}: unknown target, skipping")
                continue
            if cat.safety == SAFETY_RISKY:
                warnings.append(f"{cat.name}: risky target, skipping (clean it interactively)")
                continue
            if cat.is_manual:
                warnings.append(f"{cat.name}: manual target, skipping")
                continue
            eligible.append(category_id)
        return eligible

    @staticmethod
    def _dry_run_report(jobs: list[CleanJob]) -> Report:
        report = Report()
        for job in jobs:
            report.add(CleanResult(
                category=job.category,
                cleaned_items=len(job.items),
                freed_space=sum(item.size for item in job.items),
            ))
        return report
