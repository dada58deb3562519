"""CLI entry point for perlminver."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import cast

from perlminver import __version__
from perlminver.engine.config import EngineConfig, build_resolver, load_engine_config
from perlminver.engine.resolver import VersionResolver
from perlminver.engine.rules import default_registry
from perlminver.errors import RegistryError
from perlminver.report.checker import aggregate, check_file
from perlminver.report.discovery import discover_files
from perlminver.report.render import render_table
from perlminver.version import PerlVersion, ScanError

_PERL_SUFFIXES = (".pl", ".pm", ".t")


def _load_config(args: argparse.Namespace) -> EngineConfig:
    config_path = cast(Path | None, args.config)
    if config_path is not None and not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)
    return load_engine_config(config_path)


def _build_resolver(config: EngineConfig) -> VersionResolver:
    try:
        return build_resolver(config)
    except RegistryError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _parse_limit(args: argparse.Namespace) -> PerlVersion | None:
    limit_text = cast(str | None, args.limit)
    if limit_text is None:
        return None
    try:
        return PerlVersion.parse(limit_text)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _cmd_check(args: argparse.Namespace) -> None:
    config = _load_config(args)
    resolver = _build_resolver(config)

    paths = cast(list[Path], args.paths)
    explain = cast(bool, args.explain)
    limit = _parse_limit(args)
    reports = [
        check_file(path, resolver, explain=explain, limit=limit)
        for path in discover_files(paths, config.extensions)
    ]
    if not reports:
        print("Error: no Perl files found", file=sys.stderr)
        sys.exit(1)

    batch = aggregate(reports)
    if cast(bool, args.json):
        print(batch.model_dump_json(indent=2))
    else:
        print(render_table(batch, explain=explain))

    if batch.errors or batch.inconsistent:
        sys.exit(1)


def _cmd_rules(args: argparse.Namespace) -> None:
    config = _load_config(args)
    disabled = set(config.disabled_rules)
    registry = default_registry()
    width = max(len(name) for name in registry.names())
    for rule in registry:
        state = "  (disabled)" if rule.name in disabled else ""
        print(f"{str(rule.threshold):<10}{rule.name:<{width}}  {rule.description}{state}")


def _cmd_version_of(args: argparse.Namespace) -> None:
    config = _load_config(args)
    resolver = _build_resolver(config)
    source = cast(Path, args.source)
    limit = _parse_limit(args)
    if limit is not None:
        result = resolver.minimum_syntax_version(source, limit)
    else:
        result = resolver.minimum_version(source)
    print(result)
    if isinstance(result, ScanError):
        print(f"Error: {result.reason}", file=sys.stderr)
        sys.exit(1)


def _is_perl_path(arg: str) -> bool:
    return arg.endswith(_PERL_SUFFIXES)


def _configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="perlminver",
        description="Find the minimum Perl version required to run your code",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"perlminver {__version__}"
    )
    _ = parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Debug logging"
    )
    _ = parser.add_argument(
        "--config", type=Path, default=None, help="Config file (default: ./.perlminver.json)"
    )
    subparsers = parser.add_subparsers(dest="command")

    # check subcommand
    check_p = subparsers.add_parser("check", help="Check files or directories")
    _ = check_p.add_argument("paths", nargs="+", type=Path, help="Perl files or directories")
    _ = check_p.add_argument(
        "--explain", action="store_true", help="Show which rules set each version"
    )
    _ = check_p.add_argument("--json", action="store_true", help="Print a JSON report")
    _ = check_p.add_argument(
        "--limit",
        default=None,
        help="Only report syntax evidence above this version",
    )

    # rules subcommand
    _ = subparsers.add_parser("rules", help="List the syntax rules")

    # version-of subcommand
    version_p = subparsers.add_parser("version-of", help="Print the minimum version of one file")
    _ = version_p.add_argument("source", type=Path, help="Perl source file")
    _ = version_p.add_argument(
        "--limit",
        default=None,
        help="Only report syntax evidence above this version",
    )

    # Backward compat: a bare Perl file argument means "check"
    argv = sys.argv[1:]
    if argv and _is_perl_path(argv[0]):
        argv = ["check"] + argv

    args = parser.parse_args(argv)
    _configure_logging(cast(int, args.verbose))
    dispatch = {
        "check": _cmd_check,
        "rules": _cmd_rules,
        "version-of": _cmd_version_of,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler:
        handler(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
