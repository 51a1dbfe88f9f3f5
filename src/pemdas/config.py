"""Calculator configuration.

Settings are resolved in this order, later sources overriding earlier ones:
1. Defaults
2. YAML file (explicit path, or PEMDAS_CONFIG env var)
3. Environment variables (PEMDAS_STRICT, PEMDAS_DOMAIN, PEMDAS_PRECISION,
   PEMDAS_LOG_LEVEL)
Command line options are applied on top by the CLI.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from pemdas.numeric import NumberDomain

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

ENV_PREFIX = "PEMDAS_"


@dataclass(frozen=True)
class CalculatorConfig:
    """Settings shared by the CLI, the interactive shell and the API.

    Attributes:
        strict: Report unknown characters instead of skipping them
        domain: Number type expressions are evaluated in
        precision: Digits after the decimal point when printing results
        log_level: Logging level name for the CLI and service
    """

    strict: bool = True
    domain: NumberDomain = NumberDomain.FLOAT
    precision: int = 2
    log_level: str = "WARNING"

    @classmethod
    def from_mapping(cls, values: dict[str, Any], base: CalculatorConfig | None = None) -> CalculatorConfig:
        """Overlay a mapping of raw setting values on a base config."""
        config = base or cls()
        changes: dict[str, Any] = {}
        for key, raw in values.items():
            if raw is None:
                continue
            if key == "strict":
                changes["strict"] = _parse_bool(key, raw)
            elif key == "domain":
                changes["domain"] = NumberDomain.from_name(raw)
            elif key == "precision":
                changes["precision"] = _parse_precision(raw)
            elif key == "log_level":
                changes["log_level"] = _parse_log_level(raw)
            else:
                raise ValueError(f"Unknown setting '{key}'")
        return replace(config, **changes)

    @classmethod
    def from_file(cls, path: Path, base: CalculatorConfig | None = None) -> CalculatorConfig:
        """Load settings from a YAML mapping."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_mapping(data, base)

    @classmethod
    def from_env(cls, base: CalculatorConfig | None = None) -> CalculatorConfig:
        """Overlay PEMDAS_* environment variables on a base config."""
        values = {
            key: os.environ.get(f"{ENV_PREFIX}{key.upper()}")
            for key in ("strict", "domain", "precision", "log_level")
        }
        return cls.from_mapping(values, base)

    @classmethod
    def load(cls, config_path: Path | None = None) -> CalculatorConfig:
        """Resolve the full configuration (defaults, file, environment)."""
        config = cls()
        if config_path is None and os.environ.get(f"{ENV_PREFIX}CONFIG"):
            config_path = Path(os.environ[f"{ENV_PREFIX}CONFIG"])
        if config_path is not None:
            config = cls.from_file(config_path, config)
        return cls.from_env(config)


def _parse_bool(key: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Invalid boolean for '{key}': {raw!r}")


def _parse_precision(raw: Any) -> int:
    try:
        precision = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid precision: {raw!r}")
    if precision < 0:
        raise ValueError(f"Precision must be non-negative, got {precision}")
    return precision


def _parse_log_level(raw: Any) -> str:
    level = str(raw).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Invalid log level: {raw!r}")
    return level
