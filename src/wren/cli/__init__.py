"""The ``wren`` command.

Installed as a console script (``wren = "wren.cli:main"``). Each
subcommand lives in its own module and is imported only when run, so
``wren --help`` stays fast and ``wren routes`` works without pounce.
"""

import argparse
import importlib
import sys

# name -> (help, "module:function")
_COMMANDS = {
    "run": ("Start the dev server", "wren.cli._run:run_server"),
    "routes": ("List registered routes", "wren.cli._routes:run_routes"),
    "templates": ("List templates and their fragment blocks", "wren.cli._templates:run_templates"),
}


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wren",
        description="wren: whole pages or just the fragment htmx asked for.",
    )
    commands = parser.add_subparsers(dest="command")
    for name, (summary, _) in _COMMANDS.items():
        command = commands.add_parser(name, help=summary)
        command.add_argument("app", help="Import string (e.g. myapp:app)")
        if name == "run":
            command.add_argument("--host", default=None, help="Bind host address")
            command.add_argument("--port", type=int, default=None, help="Bind port number")
            command.add_argument(
                "--reload", action="store_true", help="Reload on source and template changes"
            )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)
    module, _, function = _COMMANDS[args.command][1].partition(":")
    getattr(importlib.import_module(module), function)(args)
