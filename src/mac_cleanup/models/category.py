"""Catalog model: categories, groups and the loaded catalog."""

from __future__ import annotations

from dataclasses import dataclass, field

SAFETY_SAFE = "safe"
SAFETY_MODERATE = "moderate"
SAFETY_RISKY = "risky"
SAFETY_LEVELS = (SAFETY_SAFE, SAFETY_MODERATE, SAFETY_RISKY)

METHOD_TRASH = "trash"
METHOD_PERMANENT = "permanent"
METHOD_BUILTIN = "builtin"
METHOD_MANUAL = "manual"
METHODS = (METHOD_TRASH, METHOD_PERMANENT, METHOD_BUILTIN, METHOD_MANUAL)


@dataclass(frozen=True, slots=True)
class Category:
    """Static description of one cleanup topic.

    ``paths`` holds glob patterns (``~``, ``*`` and ``**`` are supported).
    When ``check_cmd`` is set the category is only available if that
    command is on PATH.  ``days_old`` drops items modified more recently
    than the given number of days (0 disables the filter).
    """

    id: str
    name: str
    group: str = ""
    safety: str = SAFETY_SAFE
    method: str = METHOD_TRASH
    note: str = ""
    guide: str = ""
    paths: tuple[str, ...] = ()
    check_cmd: str = ""
    days_old: int = 0

    @property
    def is_builtin(self) -> bool:
        return self.method == METHOD_BUILTIN

    @property
    def is_manual(self) -> bool:
        return self.method == METHOD_MANUAL


@dataclass(frozen=True, slots=True)
class Group:
    """Display grouping for related categories."""

    id: str
    name: str
    order: int = 0


@dataclass(slots=True)
class Config:
    """The loaded catalog."""

    categories: list[Category] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)

    def category(self, category_id: str) -> Category | None:
        """Look up a category by ID."""
        for cat in self.categories:
            if cat.id == category_id:
                return cat
        return None

    def groups_by_order(self) -> list[Group]:
        """Groups sorted by their display order, then by ID."""
        return sorted(self.groups, key=lambda g: (g.order, g.id))

    def categories_in_group(self, group_id: str) -> list[Category]:
        return [c for c in self.categories if c.group == group_id]
