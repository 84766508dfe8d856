"""Calling user code that may be a plain function or a coroutine function."""

import inspect
from collections.abc import Callable
from typing import Any


async def invoke(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await what it returns when that is awaitable."""
    result = func(*args, **kwargs)
    return await result if inspect.isawaitable(result) else result


async def invoke_leading(func: Callable[..., Any], *args: Any) -> Any:
    """Like ``invoke``, passing only as many of *args* as *func* declares.

    ``handler()``, ``handler(request)`` and ``handler(request, exc)`` all
    fit ``invoke_leading(handler, request, exc)``.
    """
    params = inspect.signature(func).parameters.values()
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return await invoke(func, *args)
    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    return await invoke(func, *args[: len(positional)])
