"""Docker reclaimable space target."""

from __future__ import annotations

import json
import logging
import re
import subprocess

from mac_cleanup.models.clean_result import CleanResult
from mac_cleanup.models.scan_result import CleanableItem, ScanResult
from mac_cleanup.models.target import BuiltinCleaner, Target
from mac_cleanup.utils import command_exists, run_command

log = logging.getLogger(__name__)

DOCKER_TIMEOUT = 60
DOCKER_PRUNE_TIMEOUT = 600

_TYPE_NAMES = {
    "images": "Docker Images",
    "containers": "Docker Containers",
    "local volumes": "Docker Volumes [!DB DATA RISK]",
    "build cache": "Docker Build Cache",
}

_PRUNE_COMMANDS = {
    "docker:images": ["docker", "image", "prune", "-af"],
    "docker:containers": ["docker", "container", "prune", "-f"],
    "docker:local volumes": ["docker", "volume", "prune", "-af"],
    "docker:build cache": ["docker", "builder", "prune", "-af"],
}

_UNITS = (
    ("TB", 1024 ** 4),
    ("GB", 1024 ** 3),
    ("MB", 1024 ** 2),
    ("KB", 1024),
    ("B", 1),
)

_PERCENT_SUFFIX = re.compile(r"\s*\(.*\)\s*$")


def parse_docker_size(text: str) -> int:
    """Parse sizes printed by ``docker system df`` such as ``1.5GB (30%)``.

    Units are binary (``1KB`` is 1024 bytes).  Unparseable input yields 0.
    """
    value = _PERCENT_SUFFIX.sub("", text).strip().upper()
    multiplier = 1
    for unit, factor in _UNITS:
        if value.endswith(unit):
            value = value[: -len(unit)].strip()
            multiplier = factor
            break
    try:
        return int(float(value) * multiplier)
    except ValueError:
        return 0


def docker_type_name(resource_type: str) -> str:
    """Display name for a ``docker system df`` Type."""
    return _TYPE_NAMES.get(resource_type.lower(), f"Docker {resource_type}")


class DockerTarget(Target, BuiltinCleaner):
    """Reports reclaimable Docker images, containers, volumes and build cache.

    Items carry synthetic ``docker:<type>`` paths; cleaning runs the
    matching ``docker ... prune`` command.
    """

    def is_available(self) -> bool:
        if not command_exists("docker"):
            return False
        try:
            proc = run_command(["docker", "version"], timeout=DOCKER_TIMEOUT)
        except (OSError, subprocess.SubprocessError) as e:
            log.debug("Docker daemon check failed: %s", e)
            return False
        return proc.returncode == 0

    def scan(self) -> ScanResult:
        result = ScanResult(category=self.category)
        if not self.is_available():
            return result
        try:
            proc = run_command(
                ["docker", "system", "df", "--format", "{{json .}}"],
                timeout=DOCKER_TIMEOUT,
            )
        except (OSError, subprocess.SubprocessError) as e:
            result.error = f"docker system df: {e}"
            return result
        if proc.returncode != 0:
            result.error = f"docker system df: {proc.stderr.strip() or proc.returncode}"
            return result

        items = []
        for line in proc.stdout.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError:
                log.debug("Ignoring unparseable docker df line: %s", line)
                continue
            item = self._item_from_row(row)
            if item is not None:
                items.append(item)
        return ScanResult.from_items(self.category, items)

    @staticmethod
    def _item_from_row(row: dict) -> CleanableItem | None:
        resource_type = str(row.get("Type", ""))
        size = parse_docker_size(str(row.get("Reclaimable", "")))
        if not resource_type or size <= 0:
            return None
        try:
            count = int(row.get("TotalCount", 0))
        except (TypeError, ValueError):
            count = 0
        return CleanableItem(
            path=f"docker:{resource_type.lower()}",
            size=size,
            file_count=count,
            name=docker_type_name(resource_type),
        )

    def clean(self, items: list[CleanableItem]) -> CleanResult:
        result = CleanResult(category=self.category)
        for item in items:
            args = _PRUNE_COMMANDS.get(item.path)
            if args is None:
                result.errors.append(f"{item.path}: unknown docker resource")
                continue
            try:
                proc = run_command(args, timeout=DOCKER_PRUNE_TIMEOUT)
            except (OSError, subprocess.SubprocessError) as e:
                result.errors.append(f"{item.path}: {e}")
                continue
            if proc.returncode != 0:
                reason = proc.stderr.strip() or f"exit status {proc.returncode}"
                result.errors.append(f"{item.path}: {reason}")
                continue
            result.freed_space += item.size
            result.cleaned_items += 1
        return result
