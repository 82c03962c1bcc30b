"""Layered config loading: defaults < YAML < env/.env < overrides."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_TOP_LEVEL_KEYS = frozenset({"app_name", "environment"})

# Flat-key prefix -> YAML section ("log_level" lives under "logging").
_PREFIX_SECTIONS: dict[str, str] = {
    "omdb": "omdb",
    "http": "http",
    "search": "search",
    "rating": "rating",
    "log": "logging",
}
_SECTIONS = frozenset(_PREFIX_SECTIONS.values())


def _split_flat_key(key: str) -> tuple[str, str] | None:
    """``"search_min_query_length"`` -> ``("search", "min_query_length")``."""
    prefix, sep, rest = key.partition("_")
    section = _PREFIX_SECTIONS.get(prefix)
    if not sep or section is None:
        return None
    return section, rest


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape; unknown keys are dropped.

    Sectioned blocks (``{"search": {...}}``) and flat keys
    (``search_debounce_seconds``) may be mixed; a flat key wins over the
    same setting given inside a block of the same layer.
    """
    out: dict[str, Any] = {k: layer[k] for k in _TOP_LEVEL_KEYS if k in layer}
    for section in _SECTIONS:
        block = layer.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)
    for key, value in layer.items():
        target = _split_flat_key(key)
        if target is not None:
            section, name = target
            out.setdefault(section, {})[name] = value
    return out


def _merge_into(base: dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            base[key] = value


def _read_yaml(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _layers(
    config_path: Path | None, overrides: Mapping[str, Any]
) -> Iterator[Mapping[str, Any]]:
    """Yield layers lowest precedence first."""
    yield deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield _read_yaml(config_path)
    yield EnvOverrides().to_update_dict()
    yield overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build the validated AppConfig.

    ``dotenv_path`` is loaded into the process environment first (without
    replacing variables that are already set), so its ``RATEIT_*`` values
    count as env vars. Missing explicit paths raise ``FileNotFoundError``.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, overrides or {}):
        _merge_into(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
