"""Target registry and the catalog-driven default wiring."""

from __future__ import annotations

import logging
from typing import Callable, Iterator

from mac_cleanup.errors import ConfigError
from mac_cleanup.models.category import METHOD_BUILTIN, Category, Config
from mac_cleanup.models.target import Target
from mac_cleanup.targets.brew import BrewTarget
from mac_cleanup.targets.docker import DockerTarget
from mac_cleanup.targets.old_download import OldDownloadTarget
from mac_cleanup.targets.path import PathTarget
from mac_cleanup.targets.project_cache import ProjectCacheTarget
from mac_cleanup.targets.system_cache import SystemCacheTarget

log = logging.getLogger(__name__)

SYSTEM_CACHE_ID = "system-cache"

BuiltinFactory = Callable[[Category, list[Category]], Target]

_builtin_factories: dict[str, BuiltinFactory] = {}


def register_builtin(category_id: str, factory: BuiltinFactory) -> None:
    """Register the factory building the target for a builtin category."""
    if category_id in _builtin_factories:
        log.warning("Builtin '%s' already registered, replacing", category_id)
    _builtin_factories[category_id] = factory


def builtin_factory(category_id: str) -> BuiltinFactory | None:
    return _builtin_factories.get(category_id)


def builtin_ids() -> list[str]:
    return sorted(_builtin_factories)


register_builtin("homebrew", lambda cat, _all: BrewTarget(cat))
register_builtin("docker", lambda cat, _all: DockerTarget(cat))
register_builtin("old-downloads", lambda cat, _all: OldDownloadTarget(cat))
register_builtin("project-cache", lambda cat, _all: ProjectCacheTarget(cat))
register_builtin(SYSTEM_CACHE_ID, lambda cat, all_cats: SystemCacheTarget(cat, all_cats))


class TargetRegistry:
    """Stores and retrieves targets by category ID."""

    def __init__(self) -> None:
        self._targets: dict[str, Target] = {}

    def register(self, target: Target) -> None:
        """Register a target, replacing any earlier one with the same ID."""
        if target.id in self._targets:
            log.debug("Replacing target '%s'", target.id)
        self._targets[target.id] = target

    def get(self, category_id: str) -> Target | None:
        return self._targets.get(category_id)

    def all(self) -> list[Target]:
        """All targets in registration order."""
        return list(self._targets.values())

    def available(self) -> list[Target]:
        """Targets whose ``is_available`` check passes."""
        available = []
        for target in self._targets.values():
            try:
                if target.is_available():
                    available.append(target)
            except Exception:
                log.exception("Error checking availability for target '%s'", target.id)
        return available

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets.values())

    def __contains__(self, category_id: str) -> bool:
        return category_id in self._targets


def default_registry(config: Config) -> TargetRegistry:
    """Build a registry with one target per catalog category.

    ``system-cache`` gets the exclusion-aware target, builtin categories
    get their registered implementation and everything else a plain
    :class:`PathTarget`.  Raises :class:`ConfigError` for a builtin
    category with no implementation.
    """
    registry = TargetRegistry()
    for cat in config.categories:
        if cat.id == SYSTEM_CACHE_ID:
            factory = _builtin_factories[SYSTEM_CACHE_ID]
        elif cat.method == METHOD_BUILTIN:
            factory = _builtin_factories.get(cat.id)
            if factory is None:
                raise ConfigError(f"no builtin target registered for '{cat.id}'")
        else:
            registry.register(PathTarget(cat))
            continue
        registry.register(factory(cat, config.categories))
    log.debug("Registered %d targets", len(registry))
    return registry
