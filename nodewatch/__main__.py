"""Entry point — python -m nodewatch."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import yaml

from nodewatch.checks.models import Status, Threshold

EPILOG = """\
exit codes: 0 ok, 1 warning, 2 critical, 3 unknown

-W/-C apply to the selected check: memory (MB), ping (ms), stats (metric
units), ring (minimum valid members), compaction (affected partitions),
top (largest message queue).
"""


class _PluginArgumentParser(argparse.ArgumentParser):
    """Usage errors exit UNKNOWN (3) rather than argparse's 2, which means CRITICAL."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        print(f"unknown: {message}")
        sys.exit(Status.UNKNOWN.exit_code)


def build_parser() -> argparse.ArgumentParser:
    parser = _PluginArgumentParser(
        prog="nodewatch",
        description="Health checks for a running Riak node",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "check", nargs="?",
        help="Check to run (see --list)",
    )
    parser.add_argument(
        "-a", "--all", action="store_true",
        help="Run every check",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to configuration YAML file",
        default=None,
    )
    parser.add_argument("-d", "--data-dir", help="Node data directory (contains leveldb/)")
    parser.add_argument("-H", "--host", help="Node HTTP host")
    parser.add_argument("-n", "--node", help="Erlang node name, e.g. riak@127.0.0.1")
    parser.add_argument("-p", "--port", type=int, help="Node HTTP port")
    parser.add_argument("-s", "--service", help="Service manager unit name")
    parser.add_argument("-t", "--timeout", type=float, help="Command and request timeout (seconds)")
    parser.add_argument("-W", "--warning", type=float, help="Warning threshold")
    parser.add_argument("-C", "--critical", type=float, help="Critical threshold")
    parser.add_argument(
        "-l", "--list", action="store_true",
        help="List available checks and exit",
    )
    parser.add_argument(
        "-f", "--format", choices=("text", "json"), default="text",
        help="Output format",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress to stderr (-vv for debug)",
    )
    return parser


def _fail(message: str) -> int:
    print(f"unknown: {message}")
    return Status.UNKNOWN.exit_code


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    from nodewatch.app import Application, setup_logging
    from nodewatch.checks.registry import build_default_registry
    from nodewatch.config.settings import apply_overrides, load_config

    registry = build_default_registry()

    if args.list:
        from rich.console import Console
        from nodewatch.ui.output import render_check_list
        render_check_list(Console(), registry.describe())
        return 0

    if args.all and args.check:
        parser.error("give either a check name or -a, not both")
    if not args.all and not args.check:
        parser.error("no check given (use -a for all, --list for names)")
    if args.check and registry.get(args.check) is None:
        parser.error(
            f"unknown check '{args.check}' (choose from {', '.join(registry.names())})"
        )

    try:
        settings = load_config(args.config)
        apply_overrides(
            settings,
            host=args.host, port=args.port, node=args.node,
            data_dir=args.data_dir, service=args.service, timeout=args.timeout,
        )
    except (ValueError, OSError, yaml.YAMLError) as exc:
        return _fail(f"configuration error: {exc}")

    if args.verbose:
        setup_logging(logging.DEBUG if args.verbose > 1 else logging.INFO)
    else:
        setup_logging(settings.logging.level)

    override = None
    if args.warning is not None or args.critical is not None:
        override = Threshold(warning=args.warning, critical=args.critical)

    app = Application(settings, registry=registry)
    try:
        results = asyncio.run(app.run(None if args.all else args.check, override=override))
    except KeyboardInterrupt:
        return _fail("interrupted")
    return app.report(results, args.format)


if __name__ == "__main__":
    sys.exit(main())
