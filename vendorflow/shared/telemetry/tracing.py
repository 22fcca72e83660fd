"""Utility functions and decorators for distributed tracing."""

import asyncio
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")


def _setup_span(
    span: trace.Span,
    attributes: dict[str, str | int | float | bool] | None,
    kwargs: dict[str, Any],
) -> None:
    """Set optional attributes and safe kwargs on the current span."""
    if attributes:
        for key, value in attributes.items():
            span.set_attribute(key, value)
    _set_safe_span_attrs(span, kwargs)


def _run_in_span_sync(span: trace.Span, run: Callable[[], T]) -> T:
    """Run a sync callable, set span status, and record exceptions."""
    try:
        result = run()
    except Exception as e:
        span.set_status(Status(StatusCode.ERROR, str(e)))
        span.record_exception(e)
        raise
    else:
        span.set_status(Status(StatusCode.OK))
        return result


async def _run_in_span_async(span: trace.Span, run: Callable[[], Any]) -> Any:
    """Run an async callable, set span status, and record exceptions."""
    try:
        result = await run()
    except Exception as e:
        span.set_status(Status(StatusCode.ERROR, str(e)))
        span.record_exception(e)
        raise
    else:
        span.set_status(Status(StatusCode.OK))
        return result


def traced(
    operation_name: str | None = None,
    attributes: dict | None = None,
) -> Callable:
    """Decorator to create a span for a function (sync or async).

    Without a configured tracer provider the OpenTelemetry API hands out
    non-recording spans, so decorated code runs unchanged in tests.

    Args:
        operation_name: Span name (defaults to module.funcname).
        attributes: Optional dict of attributes to set on the span.

    Returns:
        Decorated function.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(__name__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _setup_span(span, attributes, kwargs)
                return await _run_in_span_async(
                    span, lambda: func(*args, **kwargs)
                )

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _setup_span(span, attributes, kwargs)
                return _run_in_span_sync(span, lambda: func(*args, **kwargs))

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


# Only these kwarg names are copied onto spans. Share tokens are bearer
# capabilities and must never be recorded.
_SAFE_SPAN_ATTR_KEYS = frozenset({
    "document_id", "chain_id", "edge_id", "permission_id", "notification_id",
    "from_user_id", "to_user_id", "user_id", "granter_id", "grantee_id",
    "revoked_by_user_id", "requested_by", "unread_only", "accept",
})


def _set_safe_span_attrs(span: trace.Span, kwargs: dict) -> None:
    """Set span attributes from kwargs; only allowlisted keys are recorded."""
    for key, value in kwargs.items():
        if not key.startswith("_") and key.lower() in _SAFE_SPAN_ATTR_KEYS:
            span.set_attribute(f"arg.{key}", str(value))
