"""CLI interface for mac-cleanup."""

from __future__ import annotations

import logging
import os
import sys

import click

from mac_cleanup import __version__
from mac_cleanup.catalog import load_embedded, merge_user_config
from mac_cleanup.core.registry import TargetRegistry, default_registry
from mac_cleanup.core.runner import Runner
from mac_cleanup.core.scanner import ScanPipeline
from mac_cleanup.errors import ConfigError, RunnerError, UserConfigError
from mac_cleanup.models.category import SAFETY_MODERATE, SAFETY_RISKY, Category, Config
from mac_cleanup.models.progress import CategoryCleaned, CleanCallbacks
from mac_cleanup.report import format_report
from mac_cleanup.userconfig import UserConfig
from mac_cleanup.utils import bytes_to_human, check_full_disk_access, xdg_config_home

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2

_LOG_FILE = "debug.log"


def _setup_logging(debug: bool) -> None:
    if not debug:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
        return
    log_dir = xdg_config_home() / "mac-cleanup"
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG,
        filename=log_dir / _LOG_FILE,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> None:
    click.echo(f"{click.style('Error:', fg='red', bold=True)} {message}", err=True)
    sys.exit(EXIT_FATAL)


def _warn(message: str) -> None:
    click.echo(f"{click.style('Warning:', fg='yellow', bold=True)} {message}", err=True)


def _warn_full_disk_access() -> None:
    if not check_full_disk_access():
        _warn("Full Disk Access is not granted to this terminal; some caches cannot be read.")


def _category_tags(cat: Category) -> str:
    tags = ""
    if cat.safety == SAFETY_MODERATE:
        tags += click.style(" [moderate]", fg="yellow")
    elif cat.safety == SAFETY_RISKY:
        tags += click.style(" [risky]", fg="red")
    if cat.is_manual:
        tags += click.style(" [manual]", fg="bright_black")
    return tags


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("target_ids", nargs=-1)
@click.option("--clean", "do_clean", is_flag=True, help="Scan the selected targets and clean them")
@click.option("--dry-run", is_flag=True, help="With --clean, report what would be freed without removing anything")
@click.option("--list", "list_targets", is_flag=True, help="List all targets in the catalog")
@click.option("--debug", is_flag=True, help="Write debug logs to ~/.config/mac-cleanup/debug.log")
@click.version_option(__version__, "-v", "--version", prog_name="mac-cleanup", message="%(prog)s %(version)s")
def main(
    target_ids: tuple[str, ...],
    do_clean: bool,
    dry_run: bool,
    list_targets: bool,
    debug: bool,
) -> None:
    """mac-cleanup: find and remove reclaimable disk space on macOS.

    Without --clean or --list, scans TARGET_IDS (or the saved selection)
    and shows how much space could be reclaimed.
    """
    _setup_logging(debug or os.environ.get("DEBUG", "").lower() == "true")

    if dry_run and not do_clean:
        _fail("--dry-run requires --clean")

    try:
        user_config = UserConfig.load()
    except UserConfigError as e:
        _fail(str(e))

    try:
        config, warnings = merge_user_config(load_embedded(), user_config)
        registry = default_registry(config)
    except ConfigError as e:
        _fail(str(e))
    for warning in warnings:
        _warn(warning)

    if list_targets:
        _list(config, registry)
        return

    ids = list(target_ids)
    if do_clean:
        sys.exit(_clean(config, user_config, registry, ids, dry_run))
    _overview(registry, ids or user_config.get_selected_targets())


def _list(config: Config, registry: TargetRegistry) -> None:
    available = {t.id for t in registry.available()}
    for group in config.groups_by_order():
        members = config.categories_in_group(group.id)
        if not members:
            continue
        click.echo(f"\n  {click.style(group.name, fg='blue', bold=True)}")
        for cat in members:
            marker = click.style("✓", fg="green") if cat.id in available else click.style("·", fg="bright_black")
            click.echo(f"    {marker} {click.style(cat.id, fg='cyan', bold=True):30s}  {cat.name}{_category_tags(cat)}")
            if cat.note:
                click.echo(f"        {cat.note}")
    click.echo()


def _overview(registry: TargetRegistry, ids: list[str]) -> None:
    _warn_full_disk_access()
    click.echo(f"\n{click.style('Scanning', bold=True)}...\n")
    results = ScanPipeline(registry).scan(ids or None)

    total = 0
    for result in sorted(results.values(), key=lambda r: r.total_size, reverse=True):
        name = result.category.name
        if result.error:
            click.echo(f"  {click.style('✗', fg='red')} {name:35s} — {result.error}")
            continue
        if not result.items:
            click.echo(f"  {click.style('·', fg='bright_black')} {name:35s} — nothing to clean")
            continue
        locked = sum(1 for item in result.items if item.is_locked)
        locked_tag = click.style(f" [{locked} in use]", fg="yellow") if locked else ""
        click.echo(
            f"  {click.style('✓', fg='green')} {name:35s} — "
            f"{click.style(bytes_to_human(result.total_size), fg='green', bold=True)} "
            f"({len(result.items):,} items){_category_tags(result.category)}{locked_tag}"
        )
        if result.category.is_manual and result.category.guide:
            click.echo(f"      {click.style(result.category.guide, fg='bright_black')}")
        else:
            total += result.total_size

    click.echo(f"\nTotal reclaimable: {click.style(bytes_to_human(total), fg='green', bold=True)}\n")


def _clean(
    config: Config,
    user_config: UserConfig,
    registry: TargetRegistry,
    ids: list[str],
    dry_run: bool,
) -> int:
    _warn_full_disk_access()

    def on_category_done(event: CategoryCleaned) -> None:
        mark = click.style("!", fg="yellow") if event.error_count else click.style("✓", fg="green")
        click.echo(f"  {mark} {event.category_name:35s} — freed {bytes_to_human(event.freed_space)}")

    try:
        runner = Runner(config, user_config, registry)
        report, warnings = runner.run(
            dry_run=dry_run,
            target_ids=ids or None,
            callbacks=CleanCallbacks(on_category_done=on_category_done),
        )
    except RunnerError as e:
        click.echo(f"{click.style('Error:', fg='red', bold=True)} {e}", err=True)
        return EXIT_FATAL

    for warning in warnings:
        _warn(warning)
    click.echo()
    click.echo(format_report(report, dry_run), nl=False)
    return EXIT_PARTIAL if report.has_failures else EXIT_OK
