"""Cleaning result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field

from mac_cleanup.models.category import Category


@dataclass(slots=True)
class CleanResult:
    """Result of cleaning one category.

    ``errors`` holds one ``"<path>: <reason>"`` string per failed item.
    ``skipped_items`` counts SIP-protected paths and manual items.
    """

    category: Category
    cleaned_items: int = 0
    skipped_items: int = 0
    freed_space: int = 0
    errors: list[str] = field(default_factory=list)

    def merge(self, other: CleanResult) -> CleanResult:
        """Add *other*'s counters and errors into this result."""
        self.cleaned_items += other.cleaned_items
        self.skipped_items += other.skipped_items
        self.freed_space += other.freed_space
        self.errors.extend(other.errors)
        return self


@dataclass(slots=True)
class Report:
    """Aggregate of a whole cleaning run."""

    freed_space: int = 0
    cleaned_items: int = 0
    failed_items: int = 0
    results: list[CleanResult] = field(default_factory=list)
    duration: float = 0.0

    def add(self, result: CleanResult) -> None:
        """Record a category result and update the counters."""
        self.results.append(result)
        self.freed_space += result.freed_space
        self.cleaned_items += result.cleaned_items
        self.failed_items += len(result.errors)

    @property
    def has_failures(self) -> bool:
        return self.failed_items > 0
