"""``wren routes``: the route table, one row per registered route."""

import argparse

from wren.cli._resolve import resolve_or_exit
from wren.routing.route import Route

_HEADINGS = ("METHOD", "PATH", "HANDLER", "FRAGMENT")


def _row(route: Route) -> tuple[str, str, str, str]:
    handler = getattr(route.handler, "__name__", repr(route.handler))
    if route.name:
        handler += f" ({route.name})"
    return (", ".join(sorted(route.methods)), route.path, handler, route.fragment or "-")


def run_routes(args: argparse.Namespace) -> None:
    rows = [_row(route) for route in resolve_or_exit(args).router.routes]
    if not rows:
        print("No routes registered.")
        return

    widths = [max(len(row[i]) for row in (_HEADINGS, *rows)) for i in range(3)]
    for index, row in enumerate((_HEADINGS, *rows)):
        cells = [cell.ljust(width) for cell, width in zip(row, widths, strict=False)]
        print("  ".join([*cells, row[3]]))
        if index == 0:
            print("-" * min(sum(widths) + 14, 80))
