"""
Runtime settings.

Sources, lowest to highest priority:
  1. built-in defaults
  2. YAML file named by BALLOTCHECK_CONFIG (keys: timeout_s, strict_plaintext, scheme)
  3. env vars BALLOTCHECK_TIMEOUT_S, BALLOTCHECK_STRICT_PLAINTEXT, BALLOTCHECK_SCHEME

The domain suffix is fixed and cannot be overridden.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import os

import yaml

from ballotcheck.errors import ConfigurationError


DOMAIN_SUFFIX = "voteweb.fr"
DEFAULT_TIMEOUT_S = 60.0

_TRUTHY = {"1", "true", "yes", "y", "on"}
_SCHEMES = {"https", "http"}


@dataclass(frozen=True)
class Settings:
    timeout_s: float = DEFAULT_TIMEOUT_S
    strict_plaintext: bool = False
    scheme: str = "https"
    domain_suffix: str = DOMAIN_SUFFIX


def _truthy_env(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _as_timeout(value: Any) -> float:
    try:
        t = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(detail=f"timeout_s must be a number, got {value!r}")
    if t <= 0:
        raise ConfigurationError(detail="timeout_s must be > 0")
    return t


def _as_scheme(value: Any) -> str:
    s = str(value).strip().lower()
    if s not in _SCHEMES:
        raise ConfigurationError(detail=f"scheme must be one of {sorted(_SCHEMES)}, got {value!r}")
    return s


def load_config_file(path: Path) -> Dict[str, Any]:
    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8-sig"))
    except yaml.YAMLError as e:
        raise ConfigurationError(detail=f"config file {path}: {e}") from e
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise ConfigurationError(detail=f"config file {path} must hold a mapping")
    return doc


def load_settings(config_path: Optional[Path] = None) -> Settings:
    values: Dict[str, Any] = {}

    path = config_path or (Path(os.environ["BALLOTCHECK_CONFIG"]) if os.getenv("BALLOTCHECK_CONFIG") else None)
    if path is not None:
        values.update(load_config_file(path))

    if os.getenv("BALLOTCHECK_TIMEOUT_S"):
        values["timeout_s"] = os.environ["BALLOTCHECK_TIMEOUT_S"]
    if os.getenv("BALLOTCHECK_STRICT_PLAINTEXT"):
        values["strict_plaintext"] = _truthy_env("BALLOTCHECK_STRICT_PLAINTEXT")
    if os.getenv("BALLOTCHECK_SCHEME"):
        values["scheme"] = os.environ["BALLOTCHECK_SCHEME"]

    return Settings(
        timeout_s=_as_timeout(values.get("timeout_s", DEFAULT_TIMEOUT_S)),
        strict_plaintext=_as_bool(values.get("strict_plaintext", False)),
        scheme=_as_scheme(values.get("scheme", "https")),
    )
