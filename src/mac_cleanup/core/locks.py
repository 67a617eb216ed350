"""Detect paths held open by running processes."""

from __future__ import annotations

import logging
import os
import subprocess

from mac_cleanup.errors import LockCheckError
from mac_cleanup.utils import command_exists, expand_path

log = logging.getLogger(__name__)

LSOF_TIMEOUT = 10


def get_locked_paths(base_path: str) -> set[str]:
    """Return the direct children of *base_path* that have open files.

    Any open file below a child marks that whole child, e.g. an open
    ``~/Library/Caches/com.foo/db/x`` reports ``~/Library/Caches/com.foo``.
    Returns an empty set when *base_path* is empty or ``lsof`` is missing.
    Names that are not valid UTF-8 are decoded the way :func:`os.fsdecode`
    does, so they compare equal to paths from the filesystem.
    """
    if not base_path or not command_exists("lsof"):
        return set()
    base = os.path.normpath(expand_path(base_path))
    try:
        proc = subprocess.run(
            ["lsof", "-nP", "-F", "n"],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            timeout=LSOF_TIMEOUT,
        )
    except subprocess.TimeoutExpired as e:
        raise LockCheckError(f"lsof timed out after {LSOF_TIMEOUT}s") from e
    except OSError as e:
        raise LockCheckError(f"cannot run lsof: {e}") from e

    # lsof exits 1 when some processes could not be inspected.
    if proc.returncode not in (0, 1):
        raise LockCheckError(proc.stderr.strip() or f"lsof exited with {proc.returncode}")
    return parse_locked_paths(proc.stdout, base)


def parse_locked_paths(output: str, base_path: str) -> set[str]:
    """Map ``lsof -F n`` output to the top-level children of *base_path*."""
    prefix = base_path.rstrip("/") + "/"
    locked: set[str] = set()
    for line in output.splitlines():
        if not line.startswith("n"):
            continue
        path = line[1:]
        if not path.startswith(prefix):
            continue
        child = path[len(prefix):].split("/", 1)[0]
        if child:
            locked.add(prefix + child)
    return locked
