"""Plain-text rendering of a cleaning report."""

from __future__ import annotations

import click

from mac_cleanup.models.clean_result import CleanResult, Report
from mac_cleanup.utils import bytes_to_human, format_elapsed

MAX_ERRORS_PER_CATEGORY = 5


def status_label(result: CleanResult) -> str:
    """``OK`` without errors, ``WARN`` for partial success, ``FAIL`` otherwise."""
    if not result.errors:
        return "OK"
    if result.cleaned_items > 0:
        return "WARN"
    return "FAIL"


_STATUS_COLORS = {"OK": "green", "WARN": "yellow", "FAIL": "red"}


def format_report(report: Report | None, dry_run: bool = False) -> str:
    """Render *report* for terminal output.

    Categories that cleaned nothing and failed nothing are left out; the
    rest are listed largest first with up to
    :data:`MAX_ERRORS_PER_CATEGORY` error lines each.
    """
    if report is None:
        return "No report available.\n"

    title = "Dry Run Report" if dry_run else "Cleanup Report"
    freed_label = "Would free" if dry_run else "Recovered"
    lines = [
        click.style(title, bold=True),
        click.style("-" * len(title), fg="bright_black"),
        f"{freed_label}: {click.style(bytes_to_human(report.freed_space), fg='green', bold=True)}",
        f"Items: {report.cleaned_items:,} cleaned, {report.failed_items:,} failed",
        f"Time: {format_elapsed(report.duration)}",
        "",
    ]

    results = [r for r in report.results if r.cleaned_items or r.errors]
    if not results:
        lines.append("No items to clean.")
        return "\n".join(lines) + "\n"

    for result in sorted(results, key=lambda r: r.freed_space, reverse=True):
        status = status_label(result)
        lines.append(
            f"  {click.style(f'{status:4s}', fg=_STATUS_COLORS[status])} "
            f"{result.category.name:35s} {bytes_to_human(result.freed_space):>10s}  "
            f"({result.cleaned_items:,} items)"
        )
        for err in result.errors[:MAX_ERRORS_PER_CATEGORY]:
            lines.append(click.style(f"         - {err}", fg="bright_black"))
        hidden = len(result.errors) - MAX_ERRORS_PER_CATEGORY
        if hidden > 0:
            lines.append(click.style(f"         ... and {hidden} more", fg="bright_black"))

    return "\n".join(lines) + "\n"
