"""Datadog spans around storage facade operations."""

import functools
from collections.abc import Callable
from typing import Any, TypeVar, cast

from ddtrace.trace import tracer

SPAN_NAME = "ceph.storage"

F = TypeVar("F", bound=Callable[..., Any])


def traced(operation: str) -> Callable[[F], F]:
    """
    Runs the decorated facade method inside a `ceph.storage` span.

    Args:
        operation: Span resource, the facade operation name (e.g. "get").
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.trace(SPAN_NAME, resource=operation):
                return func(*args, **kwargs)

        return cast(F, wrapper)

    return decorator
