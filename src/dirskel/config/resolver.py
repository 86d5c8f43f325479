"""Configuration layering for dirskel."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import DirskelConfig

ENV_PREFIX = "DIRSKEL__"


def resolve_with_precedence(
    *,
    defaults: DirskelConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> DirskelConfig:
    """Merge configuration layers; later layers win (defaults < file < env < CLI).

    Keys in any layer may be dotted (``replication.on_error``) or nested.

    Raises:
        ConfigError: If a layer is malformed or the merged values fail validation.
    """
    merged = defaults.model_dump(mode="python")
    for layer in (file_overrides, env_overrides, cli_overrides):
        if layer is None:
            continue
        if not isinstance(layer, MappingABC):
            raise ConfigError("Configuration overrides must be a mapping.")
        expanded: dict[str, Any] = {}
        for key, value in layer.items():
            assign_dotted(expanded, str(key), value)
        merged = _deep_merge(merged, expanded)

    try:
        return DirskelConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def assign_dotted(target: dict[str, Any], key: str, value: Any) -> None:
    """Write value at the dotted key inside target, creating sections as needed.

    Raises:
        ConfigError: If the key is empty or a segment already holds a scalar.
    """
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise ConfigError("Configuration keys must be dotted paths such as 'replication.on_error'.")
    node = target
    for segment in segments[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(f"Cannot assign {key}: '{segment}' is not a section.")
        node = existing
    leaf = segments[-1]
    current = node.get(leaf)
    if isinstance(value, MappingABC) and isinstance(current, MappingABC):
        node[leaf] = _deep_merge(current, value)
    else:
        node[leaf] = deepcopy(value)


def flatten_for_env(config: DirskelConfig) -> Dict[str, str]:
    """Render the config as `DIRSKEL__SECTION__KEY` environment variables."""
    flat: Dict[str, str] = {}
    for section, fields in config.model_dump(mode="python").items():
        for field, value in fields.items():
            env_key = f"{ENV_PREFIX}{section.upper()}__{field.upper()}"
            if isinstance(value, bool):
                flat[env_key] = "true" if value else "false"
            else:
                flat[env_key] = str(value)
    return flat


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["ENV_PREFIX", "assign_dotted", "resolve_with_precedence", "flatten_for_env"]
