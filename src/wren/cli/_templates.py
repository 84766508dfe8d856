"""``wren templates``: list templates and the blocks each one renders."""

import argparse
import sys

from wren.cli._resolve import resolve_or_exit
from wren.errors import RenderError


def run_templates(args: argparse.Namespace) -> None:
    """Print each logical template name followed by its block names."""
    app = resolve_or_exit(args)

    store = app.templates
    if store is None:
        print(f"Template directory {app.config.template_dir!r} not found.", file=sys.stderr)
        raise SystemExit(1)

    names = store.names()
    if not names:
        print("No templates found.")
        return

    failed = False
    for name in names:
        try:
            blocks = store.load(name).list_blocks()
        except RenderError as exc:
            print(f"{name}  !! {exc}")
            failed = True
            continue
        print(f"{name}  [{', '.join(blocks)}]" if blocks else name)

    if failed:
        raise SystemExit(1)
