"""Progress events emitted while cleaning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class CleanProgress:
    """Cleaning advanced to *current* of *total* items."""

    category_name: str
    current_item: str
    current: int
    total: int


@dataclass(frozen=True, slots=True)
class ItemCleaned:
    """One item finished cleaning (trash and permanent methods only)."""

    path: str
    name: str
    size: int
    success: bool
    err_msg: str = ""


@dataclass(frozen=True, slots=True)
class CategoryCleaned:
    """A whole job finished; always the last event for that job."""

    category_name: str
    freed_space: int
    cleaned_items: int
    error_count: int


@dataclass(slots=True)
class CleanCallbacks:
    """Optional progress hooks.  ``None`` means the caller is not interested.

    Callbacks run synchronously on the cleaning thread and must not block.
    """

    on_progress: Callable[[CleanProgress], None] | None = None
    on_item_done: Callable[[ItemCleaned], None] | None = None
    on_category_done: Callable[[CategoryCleaned], None] | None = None
