"""Load WarbleConfig from warble.yaml / warble.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from warble._errors import ConfigError
from warble.config import WarbleConfig

_KNOWN_KEYS: frozenset[str] = frozenset({
    "host",
    "port",
    "workers",
    "debug",
    "controllers_dir",
    "templates_dir",
    "template_suffix",
    "session_secret",
})


def load_config(root: Path, **overrides: object) -> WarbleConfig:
    """Load WarbleConfig from root, optionally merging warble.yaml.

    Looks for warble.yaml, warble.yml, or warble.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags do not mask file values.

    Raises:
        ConfigError: If the config file is malformed or names unknown keys.

    """
    file_config = _read_warble_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    unknown = sorted(set(merged) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown warble config keys: {', '.join(unknown)}"
        raise ConfigError(msg)
    return WarbleConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_warble_config(root: Path) -> dict[str, object]:
    """Read warble config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("warble.yaml", "warble.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "warble.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_warble_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Failed to parse {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_warble_section(data)


def _flatten_warble_section(data: dict[str, object]) -> dict[str, object]:
    """Extract warble.* keys into top-level config."""
    result: dict[str, object] = {}
    warble = data.get("warble")
    if isinstance(warble, dict):
        result.update(warble)
    for k, v in data.items():
        if k != "warble" and k in _KNOWN_KEYS:
            result[k] = v
    return result
