"""Command line entry point for sapwood."""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import yaml
from prometheus_client import start_http_server
from pydantic import ValidationError

from . import __version__
from .config import EngineSettings
from .context import Context
from .engine import Engine
from .errors import SapwoodError
from .utils import setup_logging


def _parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """Parse ``KEY=VALUE`` pairs, reading values as YAML scalars."""
    variables: Dict[str, Any] = {}
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(
                f"Invalid assignment '{assignment}', expected KEY=VALUE"
            )
        try:
            variables[key] = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            variables[key] = raw
    return variables


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sapwood",
        description="Compile and run declarative action configuration.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", help="Override SAPWOOD_LOG_LEVEL")
    parser.add_argument(
        "--log-format", choices=["json", "plain"], help="Override SAPWOOD_LOG_FORMAT"
    )
    parser.add_argument(
        "--plugin",
        dest="plugins",
        action="append",
        default=[],
        metavar="MODULE",
        help="Import MODULE to register additional actions (repeatable)",
    )

    # Subcommands keep their own dest so their default cannot reset the top-level list
    plugin_options = argparse.ArgumentParser(add_help=False)
    plugin_options.add_argument(
        "--plugin",
        dest="command_plugins",
        action="append",
        default=[],
        metavar="MODULE",
        help="Import MODULE to register additional actions (repeatable)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser(
        "run", parents=[plugin_options], help="Compile and execute a configuration file"
    )
    run.add_argument("file", help="YAML or JSON configuration file")
    run.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Set a context variable before execution (repeatable)",
    )

    check = subparsers.add_parser(
        "check", parents=[plugin_options], help="Compile a configuration file without running it"
    )
    check.add_argument("file", help="YAML or JSON configuration file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides: Dict[str, Any] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format

    plugins = [*args.plugins, *args.command_plugins]

    try:
        settings = EngineSettings(**overrides)
        if plugins:
            settings.plugins = [*settings.plugins, *plugins]
    except ValidationError as e:
        setup_logging().error(
            "Invalid settings",
            errors=[
                {"field": ".".join(str(loc) for loc in error["loc"]), "error": error["msg"]}
                for error in e.errors()
            ],
        )
        return 1

    # Setup structured logging
    logger = setup_logging(settings.log_level, settings.log_format)
    logger.debug("Starting sapwood", version=__version__, command=args.command)

    if settings.metrics_enabled:
        start_http_server(settings.metrics_port)
        logger.info("Started Prometheus metrics server", port=settings.metrics_port)

    try:
        engine = Engine(settings)
        action = engine.load(args.file)

        if args.command == "check":
            print(action.name or type(action).__name__)
            return 0

        context = Context(_parse_assignments(args.assignments))
        result = engine.run(action, context)

    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except SapwoodError as e:
        logger.error(
            "Failed to process configuration",
            file=args.file,
            error=str(e),
            error_type=type(e).__name__,
        )
        return 1
    except ImportError as e:
        logger.error("Failed to load plugin", error=str(e))
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
