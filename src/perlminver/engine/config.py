"""EngineConfig dataclass and loader for version-check settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from perlminver.engine.resolver import VersionResolver
from perlminver.engine.rules import default_registry
from perlminver.version import PerlVersion

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".perlminver.json"
CONFIG_SECTION = "minimum_version"


@dataclass
class EngineConfig:
    default_floor: str = "5.004"
    disabled_rules: list[str] = field(default_factory=list)
    extensions: list[str] = field(default_factory=lambda: [".pl", ".pm", ".t"])

    @property
    def floor(self) -> PerlVersion:
        return PerlVersion.parse(self.default_floor)


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load engine config from .perlminver.json with env var overrides."""
    config = EngineConfig()
    if path is None:
        path = Path.cwd() / CONFIG_FILENAME
    if path.exists():
        try:
            text = path.read_text()
            if text.strip():
                data = json.loads(text)
                section = data.get(CONFIG_SECTION, {}) if isinstance(data, dict) else {}
                if isinstance(section, dict):
                    _apply(config, section)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")

    if env_floor := os.environ.get("PERLMINVER_DEFAULT_FLOOR"):
        _set_floor(config, env_floor)
    if env_disabled := os.environ.get("PERLMINVER_DISABLED_RULES"):
        config.disabled_rules = [name.strip() for name in env_disabled.split(",") if name.strip()]
    return config


def _apply(cfg: EngineConfig, data: dict[str, object]) -> None:
    if "default_floor" in data and isinstance(data["default_floor"], str | int | float):
        _set_floor(cfg, str(data["default_floor"]))
    disabled = data.get("disabled_rules")
    if isinstance(disabled, list) and all(isinstance(name, str) for name in disabled):
        cfg.disabled_rules = list(disabled)
    extensions = data.get("extensions")
    if isinstance(extensions, list) and all(isinstance(ext, str) for ext in extensions):
        cfg.extensions = [ext if ext.startswith(".") else f".{ext}" for ext in extensions]


def _set_floor(cfg: EngineConfig, value: str) -> None:
    try:
        PerlVersion.parse(value)
    except ValueError:
        logger.warning(f"Ignoring invalid default_floor {value!r}")
        return
    cfg.default_floor = value


def build_resolver(config: EngineConfig) -> VersionResolver:
    """Resolver using the default ruleset minus any disabled rules."""
    registry = default_registry()
    if config.disabled_rules:
        registry = registry.without(config.disabled_rules)
    return VersionResolver(registry, default_floor=config.floor)
