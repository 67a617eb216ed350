"""Per-user preferences stored as YAML.

The file lives at ``$XDG_CONFIG_HOME/mac-cleanup/config.yaml``
(``~/.config/mac-cleanup/config.yaml`` by default)::

    excluded_paths:
      system-cache:
        - /Users/me/Library/Caches/com.example.keep
    selected_targets:
      - homebrew
      - docker
    target_overrides:
      logs:
        paths: [~/Library/Logs/MyTool]
      spotify:
        disabled: true
    custom_targets:
      - id: my-tool
        name: My Tool Cache
        paths: [~/Library/Caches/my-tool/*]

Custom targets are kept as written; they are validated when merged into
the catalog (see :func:`mac_cleanup.catalog.merge_user_config`).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mac_cleanup.errors import UserConfigError
from mac_cleanup.utils import xdg_config_home

log = logging.getLogger(__name__)

_CONFIG_DIR = "mac-cleanup"
_CONFIG_FILE = "config.yaml"


def default_config_path() -> Path:
    return xdg_config_home() / _CONFIG_DIR / _CONFIG_FILE


@dataclass(frozen=True, slots=True)
class TargetOverride:
    """Partial change to a catalog category."""

    disabled: bool = False
    paths: tuple[str, ...] = ()
    note: str | None = None

    def to_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.disabled:
            data["disabled"] = True
        if self.paths:
            data["paths"] = list(self.paths)
        if self.note is not None:
            data["note"] = self.note
        return data


@dataclass
class UserConfig:
    """Per-user settings read from ``config.yaml``."""

    excluded_paths: dict[str, list[str]] = field(default_factory=dict)
    selected_targets: list[str] = field(default_factory=list)
    target_overrides: dict[str, TargetOverride] = field(default_factory=dict)
    custom_targets: list[dict[str, Any]] = field(default_factory=list)
    path: Path | None = field(default=None, repr=False, compare=False)

    @classmethod
    def load(cls, path: Path | None = None) -> UserConfig:
        """Read the config file.

        A missing file yields an empty config; an unreadable or malformed
        one raises :class:`UserConfigError`.
        """
        path = path or default_config_path()
        if not path.exists():
            log.debug("No user config at %s", path)
            return cls(path=path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as e:
            raise UserConfigError(f"cannot read {path}: {e}") from e
        return cls._from_data(data, path)

    @classmethod
    def _from_data(cls, data: object, path: Path) -> UserConfig:
        if data is None:
            return cls(path=path)
        if not isinstance(data, dict):
            raise UserConfigError(f"{path}: expected a mapping at the top level")

        excluded_raw = data.get("excluded_paths") or {}
        if not isinstance(excluded_raw, dict):
            raise UserConfigError(f"{path}: excluded_paths must be a mapping")
        excluded: dict[str, list[str]] = {}
        for category_id, paths in excluded_raw.items():
            if not isinstance(paths, list) or not all(isinstance(p, str) for p in paths):
                raise UserConfigError(f"{path}: excluded_paths.{category_id} must be a list of paths")
            if paths:
                excluded[str(category_id)] = list(paths)

        selected = data.get("selected_targets") or []
        if not isinstance(selected, list) or not all(isinstance(s, str) for s in selected):
            raise UserConfigError(f"{path}: selected_targets must be a list of target IDs")

        return cls(
            excluded_paths=excluded,
            selected_targets=list(selected),
            target_overrides=_parse_overrides(data.get("target_overrides") or {}, path),
            custom_targets=_parse_custom_targets(data.get("custom_targets") or [], path),
            path=path,
        )

    def save(self, path: Path | None = None) -> None:
        """Write the config, creating the directory if needed."""
        path = path or self.path or default_config_path()
        data: dict[str, object] = {}
        if self.excluded_paths:
            data["excluded_paths"] = self.excluded_paths
        if self.selected_targets:
            data["selected_targets"] = self.selected_targets
        overrides = {cid: o.to_data() for cid, o in self.target_overrides.items() if o.to_data()}
        if overrides:
            data["target_overrides"] = overrides
        if self.custom_targets:
            data["custom_targets"] = self.custom_targets
        try:
            path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=True), encoding="utf-8")
            os.chmod(path, 0o644)
        except OSError as e:
            raise UserConfigError(f"cannot write {path}: {e}") from e
        self.path = path

    def get_excluded_paths(self, category_id: str) -> list[str]:
        return list(self.excluded_paths.get(category_id, []))

    def set_excluded_paths(self, category_id: str, paths: list[str]) -> None:
        """Replace the exclusions of a category; an empty list removes them."""
        if paths:
            self.excluded_paths[category_id] = list(paths)
        else:
            self.excluded_paths.pop(category_id, None)

    def is_excluded(self, category_id: str, path: str) -> bool:
        return path in self.excluded_paths.get(category_id, [])

    def excluded_paths_map(self) -> dict[str, set[str]]:
        """Exclusions as sets, ready for job planning."""
        return {cid: set(paths) for cid, paths in self.excluded_paths.items()}

    def get_selected_targets(self) -> list[str]:
        return list(self.selected_targets)

    def set_selected_targets(self, target_ids: list[str]) -> None:
        self.selected_targets = list(target_ids)

    def has_selection(self) -> bool:
        return bool(self.selected_targets)


def _parse_overrides(raw: object, path: Path) -> dict[str, TargetOverride]:
    if not isinstance(raw, dict):
        raise UserConfigError(f"{path}: target_overrides must be a mapping")
    overrides: dict[str, TargetOverride] = {}
    for category_id, fields in raw.items():
        where = f"{path}: target_overrides.{category_id}"
        if fields is None:
            fields = {}
        if not isinstance(fields, dict):
            raise UserConfigError(f"{where} must be a mapping")
        disabled = fields.get("disabled", False)
        if not isinstance(disabled, bool):
            raise UserConfigError(f"{where}.disabled must be true or false")
        extra = fields.get("paths") or []
        if isinstance(extra, str):
            extra = [extra]
        if not isinstance(extra, list) or not all(isinstance(p, str) for p in extra):
            raise UserConfigError(f"{where}.paths must be a list of paths")
        note = fields.get("note")
        if note is not None and not isinstance(note, str):
            raise UserConfigError(f"{where}.note must be text")
        overrides[str(category_id)] = TargetOverride(disabled=disabled, paths=tuple(extra), note=note)
    return overrides


def _parse_custom_targets(raw: object, path: Path) -> list[dict[str, Any]]:
    if not isinstance(raw, list) or not all(isinstance(entry, dict) for entry in raw):
        raise UserConfigError(f"{path}: custom_targets must be a list of mappings")
    return [dict(entry) for entry in raw]
