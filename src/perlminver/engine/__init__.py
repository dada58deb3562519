"""Inference engine: rule registry, syntax scanner, explicit versions and resolver."""

from perlminver.engine.config import EngineConfig, build_resolver, load_engine_config
from perlminver.engine.explicit import find_explicit_version
from perlminver.engine.models import Rule, VersionMarker
from perlminver.engine.registry import RegistryBuilder, RuleRegistry
from perlminver.engine.resolver import (
    EXPLICIT_MARKER,
    MinimumVersion,
    VersionResolver,
    default_resolver,
    minimum_explicit_version,
    minimum_syntax_version,
    minimum_version,
    version_markers,
)
from perlminver.engine.rules import default_registry
from perlminver.engine.scanner import SyntaxScanner

__all__ = [
    "EXPLICIT_MARKER",
    "EngineConfig",
    "MinimumVersion",
    "RegistryBuilder",
    "Rule",
    "RuleRegistry",
    "SyntaxScanner",
    "VersionMarker",
    "VersionResolver",
    "build_resolver",
    "default_registry",
    "default_resolver",
    "find_explicit_version",
    "load_engine_config",
    "minimum_explicit_version",
    "minimum_syntax_version",
    "minimum_version",
    "version_markers",
]
