"""
Layered settings: defaults < YAML file < environment < command-line flags.

The YAML file is looked up in this order: an explicit path, $MANCALA_CONFIG,
then ~/.mancala.yaml when it exists. Sections mirror the command line:

    game:
      width: 6
      stones: 4
    generator:
      filename: positions.txt
      out: data_raw
    player:
      type: random
      name: alice
    show:
      delta: true
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .board import BoardConfig
from .errors import ParseError
from .paths import user_config_file

logger = logging.getLogger(__name__)

# (yaml section, yaml key) -> settings field
_FILE_KEYS = {
    ("game", "width"): "width",
    ("game", "stones"): "stones",
    ("generator", "filename"): "filename",
    ("generator", "out"): "out",
    ("player", "type"): "strategy",
    ("player", "name"): "name",
    ("show", "delta"): "show_delta",
}

_ENV_KEYS = {
    "MANCALA_WIDTH": "width",
    "MANCALA_STONES": "stones",
    "MANCALA_FILENAME": "filename",
    "MANCALA_OUT": "out",
    "MANCALA_PLAYER_TYPE": "strategy",
    "MANCALA_PLAYER_NAME": "name",
}

_INT_FIELDS = {"width", "stones"}


@dataclass(frozen=True)
class Settings:
    width: int = 6
    stones: int = 4
    filename: str = "positions.txt"
    out: Optional[str] = None
    strategy: str = "console"
    name: Optional[str] = None  # defaults to the strategy kind
    show_delta: bool = False

    def board(self) -> BoardConfig:
        return BoardConfig(width=self.width, stones=self.stones)


def _coerce(field_name: str, value: Any, origin: str) -> Any:
    if field_name in _INT_FIELDS:
        if isinstance(value, bool):
            raise ParseError(f"{origin}: {field_name} must be an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ParseError(f"{origin}: {field_name} must be an integer, got {value!r}") from None
    if field_name == "show_delta":
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
    return None if value is None else str(value)


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read a YAML settings file into a flat {field: value} mapping."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ParseError(f"{path}: invalid YAML: {exc}") from None
    if not isinstance(raw, dict):
        raise ParseError(f"{path}: top level must be a mapping")
    values: Dict[str, Any] = {}
    for (section, key), field_name in _FILE_KEYS.items():
        block = raw.get(section)
        if isinstance(block, dict) and key in block:
            values[field_name] = _coerce(field_name, block[key], str(path))
    return values


def _resolve_config_path(path: Optional[Path], env: Mapping[str, str]) -> Optional[Path]:
    if path is not None:
        if not path.exists():
            raise ParseError(f"config file not found: {path}")
        return path
    env_path = env.get("MANCALA_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ParseError(f"config file not found: {p}")
        return p
    default = user_config_file()
    return default if default.exists() else None


def load_settings(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Settings:
    if env is None:
        env = os.environ
    settings = Settings()

    cfg_path = _resolve_config_path(path, env)
    if cfg_path is not None:
        logger.debug("Using config file: %s", cfg_path)
        settings = replace(settings, **read_config_file(cfg_path))

    from_env: Dict[str, Any] = {}
    for var, field_name in _ENV_KEYS.items():
        if var in env and env[var] != "":
            from_env[field_name] = _coerce(field_name, env[var], var)
    settings = replace(settings, **from_env)

    if overrides:
        known = {f.name for f in fields(Settings)}
        given = {k: v for k, v in overrides.items() if k in known and v is not None}
        settings = replace(settings, **given)
    return settings
