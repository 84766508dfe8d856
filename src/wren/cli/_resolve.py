"""Finding the user's App from a ``module:attribute`` string."""

import argparse
import importlib
import sys

from wren.app import App


def resolve_app(target: str) -> App:
    """Import *target* and return the App it names.

    ``"todo"`` means ``"todo:app"``. An attribute that is callable but
    not an App is taken to be a factory and called once with no
    arguments. Import failures propagate as ``ModuleNotFoundError`` or
    ``AttributeError``; anything that does not end up as an App is a
    ``TypeError``.
    """
    module_name, _, attribute = target.partition(":")
    found = getattr(importlib.import_module(module_name), attribute or "app")

    if not isinstance(found, App) and callable(found):
        try:
            found = found()
        except Exception as exc:
            msg = f"App factory {target!r} failed: {exc}"
            raise TypeError(msg) from exc

    if isinstance(found, App):
        return found
    msg = f"{target!r} is a {type(found).__name__}, not a wren.App instance"
    raise TypeError(msg)


def resolve_or_exit(args: argparse.Namespace) -> App:
    """``resolve_app(args.app)``; on failure print ``Error: ...`` and exit 1."""
    try:
        return resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
