"""Load and validate the target catalog."""

from __future__ import annotations

import dataclasses
import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from mac_cleanup.core.registry import SYSTEM_CACHE_ID, builtin_factory
from mac_cleanup.errors import ConfigError
from mac_cleanup.models.category import METHOD_BUILTIN, METHODS, SAFETY_LEVELS, Category, Config, Group
from mac_cleanup.userconfig import TargetOverride, UserConfig

log = logging.getLogger(__name__)

EMBEDDED_CATALOG = "targets.yaml"
CUSTOM_TARGET_GROUP = "app"


def load_config(path: Path | str) -> Config:
    """Load a catalog file.  Raises :class:`ConfigError`."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read catalog {path}: {e}") from e
    return parse_config(text, source=str(path))


def load_embedded() -> Config:
    """Load the catalog shipped with the package."""
    text = resources.files("mac_cleanup").joinpath("data", EMBEDDED_CATALOG).read_text(encoding="utf-8")
    return parse_config(text, source=EMBEDDED_CATALOG)


def parse_config(text: str, source: str = "<catalog>") -> Config:
    """Parse catalog YAML into a validated :class:`Config`."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"{source}: invalid YAML: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a mapping at the top level")

    groups = [_parse_group(raw, i, source) for i, raw in enumerate(_as_list(data, "groups", source))]
    categories = [_parse_category(raw, i, source) for i, raw in enumerate(_as_list(data, "categories", source))]

    seen: set[str] = set()
    for cat in categories:
        if cat.id in seen:
            raise ConfigError(f"{source}: duplicate category id '{cat.id}'")
        seen.add(cat.id)

    config = Config(categories=categories, groups=groups)
    log.debug("Loaded %d categories in %d groups from %s", len(categories), len(groups), source)
    return config


def _as_list(data: dict[str, Any], key: str, source: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ConfigError(f"{source}: '{key}' must be a list")
    return value


def _normalize(raw: Any, what: str, source: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ConfigError(f"{source}: {what} must be a mapping")
    return {str(k).replace("-", "_"): v for k, v in raw.items()}


def _parse_group(raw: Any, index: int, source: str) -> Group:
    fields = _normalize(raw, f"group #{index}", source)
    if not fields.get("id") or not fields.get("name"):
        raise ConfigError(f"{source}: group #{index} needs an id and a name")
    try:
        order = int(fields.get("order", index))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{source}: group '{fields['id']}' has an invalid order") from e
    return Group(id=str(fields["id"]), name=str(fields["name"]), order=order)


def _parse_category(raw: Any, index: int, source: str) -> Category:
    fields = _normalize(raw, f"category #{index}", source)
    cat_id = fields.get("id")
    if not cat_id or not fields.get("name"):
        raise ConfigError(f"{source}: category #{index} needs an id and a name")
    cat_id = str(cat_id)

    safety = str(fields.get("safety") or "safe")
    if safety not in SAFETY_LEVELS:
        raise ConfigError(f"{source}: category '{cat_id}' has unknown safety '{safety}'")
    method = str(fields.get("method") or "trash")
    if method not in METHODS:
        raise ConfigError(f"{source}: category '{cat_id}' has unknown method '{method}'")
    if method == METHOD_BUILTIN and cat_id != SYSTEM_CACHE_ID and builtin_factory(cat_id) is None:
        raise ConfigError(f"{source}: category '{cat_id}' is builtin but has no implementation")

    paths = fields.get("paths") or []
    if isinstance(paths, str):
        paths = [paths]
    if not isinstance(paths, list):
        raise ConfigError(f"{source}: category '{cat_id}' paths must be a list")

    try:
        days_old = int(fields.get("days_old") or 0)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{source}: category '{cat_id}' has an invalid days_old") from e
    if days_old < 0:
        raise ConfigError(f"{source}: category '{cat_id}' has a negative days_old")

    return Category(
        id=cat_id,
        name=str(fields["name"]),
        group=str(fields.get("group") or ""),
        safety=safety,
        method=method,
        note=str(fields.get("note") or ""),
        guide=str(fields.get("guide") or ""),
        paths=tuple(str(p) for p in paths),
        check_cmd=str(fields.get("check_cmd") or ""),
        days_old=days_old,
    )


def merge_user_config(config: Config, user_config: UserConfig) -> tuple[Config, list[str]]:
    """Apply the user's target overrides and custom targets to *config*.

    Overrides are applied first: ``disabled`` drops the category, ``paths``
    are appended and ``note`` replaces the catalog note.  Custom targets
    are then added, replacing a catalog category with the same id.  An
    invalid custom target is skipped with a warning.  *config* itself is
    left untouched.
    """
    warnings: list[str] = []
    known = {cat.id for cat in config.categories}
    for category_id in user_config.target_overrides:
        if category_id not in known:
            warnings.append(f"override for unknown target '{category_id}' ignored")

    categories: list[Category] = []
    for cat in config.categories:
        override = user_config.target_overrides.get(cat.id)
        if override is None:
            categories.append(cat)
        elif not override.disabled:
            categories.append(_apply_override(cat, override))
        else:
            log.debug("Target %s disabled by user config", cat.id)

    for index, raw in enumerate(user_config.custom_targets):
        try:
            custom = _custom_category(raw, index)
        except ConfigError as e:
            warnings.append(f"skipping custom target '{raw.get('id', '')}': {e}")
            continue
        for i, existing in enumerate(categories):
            if existing.id == custom.id:
                categories[i] = custom
                break
        else:
            categories.append(custom)

    return Config(categories=categories, groups=list(config.groups)), warnings


def _apply_override(cat: Category, override: TargetOverride) -> Category:
    changes: dict[str, Any] = {}
    if override.paths:
        changes["paths"] = cat.paths + override.paths
    if override.note is not None:
        changes["note"] = override.note
    return dataclasses.replace(cat, **changes) if changes else cat


def _custom_category(raw: dict[str, Any], index: int) -> Category:
    cat = _parse_category(raw, index, "custom_targets")
    if cat.is_builtin:
        raise ConfigError("the builtin method is reserved for shipped targets")
    if not cat.group:
        cat = dataclasses.replace(cat, group=CUSTOM_TARGET_GROUP)
    return cat
