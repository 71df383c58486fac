# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
rcrender - command line entry point.

Renders resources of a local site through the reference host application.
"""

import argparse
import importlib
import json
import logging
import sys
from typing import Any, Optional

from prettytable import PrettyTable

from rcrender import __version__
from rcrender.app import Application
from rcrender.config import load_settings
from rcrender.engine import ResourceError
from rcrender.utils import cast_literal, parse_cli_params

logger = logging.getLogger(__name__)


def _build_common_parser() -> argparse.ArgumentParser:
    common_parser = argparse.ArgumentParser(add_help=False)
    common_parser.add_argument("--config", type=str, default=None, help="Path to the settings YAML file.")
    common_parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Inline settings override using dotted keys (e.g. folders.file=content).",
    )
    common_parser.add_argument(
        "--plugin",
        action="append",
        default=[],
        metavar="MODULE",
        help="Module whose register(app) function registers custom handlers (repeatable).",
    )
    common_parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return common_parser


def configure_parser(parser: argparse.ArgumentParser) -> None:
    common_parser = _build_common_parser()
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", parents=[common_parser], help="Render one resource")
    render_parser.add_argument("name", help="Resource name")
    render_parser.add_argument("--in", dest="in_data", default=None, help="Seed input, parsed as a YAML literal.")
    render_parser.add_argument("--in-file", dest="in_file", default=None, help="Read the seed input from a YAML file.")
    render_parser.add_argument("--output", default=None, help="Write the output to this file instead of stdout.")
    render_parser.set_defaults(handler=_run_render)

    list_parser = subparsers.add_parser("list", parents=[common_parser], help="List stored resources")
    list_parser.set_defaults(handler=_run_list)

    version_parser = subparsers.add_parser("version", help="Show version information")
    version_parser.set_defaults(handler=_show_version)


def build_application(args: argparse.Namespace) -> Application:
    overrides = parse_cli_params(args.set or [])
    app = Application(load_settings(args.config, overrides))
    for module_name in args.plugin or []:
        module = importlib.import_module(module_name)
        register = getattr(module, "register", None)
        if register is None:
            raise ValueError(f"Plugin module '{module_name}' has no register(app) function")
        register(app)
        logger.debug("Loaded plugin %s", module_name)
    return app


def _read_in_data(args: argparse.Namespace) -> Any:
    if args.in_file:
        with open(args.in_file, encoding="utf-8") as f:
            return cast_literal(f.read())
    if args.in_data is not None:
        return cast_literal(args.in_data)
    return None


def format_output(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)


def _run_render(args: argparse.Namespace) -> int:
    try:
        app = build_application(args)
        in_data = _read_in_data(args)
    except (FileNotFoundError, TypeError, ValueError, ImportError, ResourceError):
        logger.exception("Failed to prepare application")
        return 2

    try:
        out = app.render_sync(args.name, in_data)
    except Exception:
        logger.exception("Failed to render resource '%s'", args.name)
        return 1

    text = format_output(out)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Wrote %s", args.output)
    else:
        print(text)
    return 0


def _run_list(args: argparse.Namespace) -> int:
    try:
        app = build_application(args)
    except (FileNotFoundError, TypeError, ValueError, ImportError, ResourceError):
        logger.exception("Failed to prepare application")
        return 2

    table = PrettyTable()
    table.field_names = ["Resource", "Operations", "Directives"]
    table.align["Resource"] = "l"
    table.align["Directives"] = "l"
    for name in sorted(app.resources):
        main = app.resources[name].main
        directives = sorted({key for op in main for key in op})
        table.add_row([name, len(main), ", ".join(directives) or "-"])
    print(table)
    return 0


def _show_version(args: argparse.Namespace) -> int:
    print(f"rcrender {__version__}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="rcrender", description="Render declarative resources.")
    configure_parser(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "debug", False) else logging.INFO,
        format="%(levelname)s %(asctime)s %(filename)s:%(lineno)d] %(message)s",
    )
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
