"""Move paths to the macOS Trash through Finder.

Finder is driven with ``osascript`` so that trashed items keep their
"Put Back" information.  Paths are sent in batches of
:data:`TRASH_BATCH_SIZE`; a failing batch is retried item by item so one
bad path does not fail its neighbours.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Callable

from mac_cleanup.core.sip import partition_protected
from mac_cleanup.errors import TrashError
from mac_cleanup.models.category import Category
from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem

log = logging.getLogger(__name__)

TRASH_BATCH_SIZE = 50
TRASH_TIMEOUT = 30


@dataclass(slots=True)
class TrashBatchResult:
    """Outcome of :func:`move_to_trash_batch`."""

    succeeded: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def escape_for_applescript(path: str) -> str:
    """Escape *path* for use inside an AppleScript string literal."""
    if "\n" in path or "\r" in path:
        raise TrashError(f"path contains a newline: {path!r}")
    return path.replace("\\", "\\\\").replace('"', '\\"')


def _build_script(paths: list[str]) -> str:
    lines = ['tell application "Finder"']
    for path in paths:
        lines.append(f'    delete POSIX file "{escape_for_applescript(path)}"')
    lines.append("end tell")
    return "\n".join(lines)


def _run_osascript(script: str) -> None:
    try:
        proc = subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            text=True,
            timeout=TRASH_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise TrashError(f"Finder did not respond within {TRASH_TIMEOUT}s") from e
    except OSError as e:
        raise TrashError(f"cannot run osascript: {e}") from e
    if proc.returncode != 0:
        raise TrashError(proc.stderr.strip() or f"osascript exited with {proc.returncode}")


def move_to_trash(path: str) -> None:
    """Move a single *path* to the Trash.  Raises :class:`TrashError`."""
    _run_osascript(_build_script([path]))


def move_to_trash_batch(paths: list[str]) -> TrashBatchResult:
    """Move *paths* to the Trash in batches.

    Every input path ends up in exactly one of ``succeeded`` or ``failed``.
    When a batch request fails, each of its paths is checked: a path that
    no longer exists was trashed before the failure; the rest are retried
    one at a time.
    """
    result = TrashBatchResult()
    for start in range(0, len(paths), TRASH_BATCH_SIZE):
        batch = paths[start:start + TRASH_BATCH_SIZE]
        try:
            _run_osascript(_build_script(batch))
        except TrashError as e:
            log.debug("Batch trash of %d paths failed (%s), retrying individually", len(batch), e)
            _recover_batch(batch, result)
        else:
            result.succeeded.extend(batch)
    return result


def _recover_batch(batch: list[str], result: TrashBatchResult) -> None:
    for path in batch:
        try:
            os.lstat(path)
        except FileNotFoundError:
            result.succeeded.append(path)
            continue
        except OSError as e:
            result.failed[path] = str(e)
            continue
        try:
            move_to_trash(path)
        except TrashError as e:
            result.failed[path] = str(e)
        else:
            result.succeeded.append(path)


def trash_items(
    category: Category,
    items: list[CleanableItem],
    validate: Callable[[CleanableItem], str | None] | None = None,
) -> CleanResult:
    """Trash *items* and build the category result.

    SIP-protected paths are counted as skipped.  *validate* may reject an
    item by returning an error message; rejected items are recorded as
    errors.  Neither kind is ever sent to Finder.
    """
    result = CleanResult(category=category)
    allowed, result.skipped_items = partition_protected(items)
    accepted: list[CleanableItem] = []
    for item in allowed:
        problem = validate(item) if validate else None
        if problem:
            result.errors.append(f"{item.path}: {problem}")
        else:
            accepted.append(item)
    if not accepted:
        return result

    batch = move_to_trash_batch([item.path for item in accepted])
    for item in accepted:
        reason = batch.failed.get(item.path)
        if reason is None:
            result.freed_space += item.size
            result.cleaned_items += 1
        else:
            result.errors.append(f"{item.path}: {reason}")
    return result
