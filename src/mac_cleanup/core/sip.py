"""System Integrity Protection path checks."""

from __future__ import annotations

import logging
import os

from mac_cleanup.models.scan_result import CleanableItem

log = logging.getLogger(__name__)

SIP_PROTECTED_PREFIXES = ("/System", "/usr", "/bin", "/sbin")
SIP_EXEMPT_PREFIXES = ("/usr/local",)


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def is_sip_protected(path: str) -> bool:
    """Whether *path* lives under a SIP-protected location.

    Symlinks are resolved first so a link pointing into ``/System`` is
    treated as protected.  ``/usr/local`` is writable and exempt.
    """
    resolved = os.path.realpath(path)
    if any(_under(resolved, p) for p in SIP_EXEMPT_PREFIXES):
        return False
    return any(_under(resolved, p) for p in SIP_PROTECTED_PREFIXES)


def partition_protected(items: list[CleanableItem]) -> tuple[list[CleanableItem], int]:
    """Split *items* into those safe to remove and a count of protected ones."""
    allowed = []
    skipped = 0
    for item in items:
        if is_sip_protected(item.path):
            log.info("Skipping SIP-protected path %s", item.path)
            skipped += 1
        else:
            allowed.append(item)
    return allowed, skipped
