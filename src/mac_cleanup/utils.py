"""Shared utility functions."""

from __future__ import annotations

import glob
import logging
import os
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

log = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")

# Readable only with Full Disk Access on macOS 10.14+.
_FDA_PROBE = "~/.Trash"


def command_exists(name: str) -> bool:
    """Check if a command exists on PATH."""
    return shutil.which(name) is not None


def run_command(
    args: list[str],
    *,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run *args* and capture text output without raising on exit status.

    ``OSError`` (missing binary) and ``subprocess.TimeoutExpired`` propagate.
    """
    log.debug("Running: %s", " ".join(args))
    return subprocess.run(args, capture_output=True, text=True, timeout=timeout)


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def expand_path(path: str) -> str:
    """Expand a leading ``~`` to the user's home directory."""
    if path == "~" or path.startswith("~/"):
        return str(Path.home()) + path[1:]
    return path


def glob_paths(pattern: str) -> list[str]:
    """Expand a catalog pattern into the existing paths it matches.

    ``*`` matches hidden entries too; ``**`` matches any number of
    directories.  A pattern without wildcards yields itself if it exists.
    """
    expanded = expand_path(pattern)
    if not any(ch in expanded for ch in _GLOB_CHARS):
        return [expanded] if os.path.lexists(expanded) else []
    return sorted(glob.glob(expanded, recursive=True, include_hidden=True))


def strip_glob_pattern(pattern: str) -> str:
    """Return the literal directory prefix of a glob pattern.

    ``~/Library/Caches/*`` becomes ``~/Library/Caches``.
    """
    parts = pattern.split("/")
    literal: list[str] = []
    for part in parts:
        if any(ch in part for ch in _GLOB_CHARS):
            break
        literal.append(part)
    base = "/".join(literal)
    if len(base) > 1:
        base = base.rstrip("/")
    return base or ("/" if pattern.startswith("/") else "")


def dir_info(path: Path | str) -> tuple[int, int]:
    """Calculate total size and file count of a directory tree.

    Symlinks are not followed.  Unreadable entries are skipped.

    Returns:
        (total_bytes, file_count) tuple.
    """
    total = 0
    count = 0
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                        else:
                            total += entry.stat(follow_symlinks=False).st_size
                            count += 1
                    except OSError as e:
                        log.debug("Skipping %s: %s", entry.path, e)
        except OSError as e:
            log.debug("Cannot read %s: %s", current, e)
    return total, count


def path_info(path: str) -> tuple[int, int, bool, datetime]:
    """Stat *path* without following a final symlink.

    Directories report their recursive size and file count; anything else
    counts as one file.  Raises ``OSError`` if *path* cannot be stat'ed.

    Returns:
        (size, file_count, is_directory, modified_at) tuple.
    """
    st = os.lstat(path)
    modified = datetime.fromtimestamp(st.st_mtime)
    if os.path.isdir(path) and not os.path.islink(path):
        size, count = dir_info(path)
        return size, count, True, modified
    return st.st_size, 1, False, modified


def default_workers() -> int:
    """Worker count for parallel size computation: CPU count, capped at 16."""
    return max(1, min(16, os.cpu_count() or 1))


def check_full_disk_access() -> bool:
    """Best-effort probe for the macOS Full Disk Access permission."""
    probe = expand_path(_FDA_PROBE)
    if not os.path.isdir(probe):
        return True
    try:
        os.listdir(probe)
    except PermissionError:
        return False
    except OSError:
        return True
    return True


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"


def format_elapsed(seconds: float) -> str:
    """Format an elapsed time as a human-readable string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds) // 60
    secs = seconds - minutes * 60
    return f"{minutes}m {secs:.0f}s"
