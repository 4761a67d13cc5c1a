"""OpenTelemetry instrumentation for the weather gateway.

Spans are created through the OpenTelemetry API, so they are no-ops until
`init_tracing` registers a Phoenix tracer provider.
"""

import functools
import inspect
import json
import logging
import os
from typing import Any, Callable, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Type variable for preserving function signatures
F = TypeVar("F", bound=Callable[..., Any])

TRACER_NAME = "weather-gateway"

logger = logging.getLogger(__name__)

# Global tracer instance
_tracer: trace.Tracer | None = None


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def init_tracing(
    project_name: str = TRACER_NAME,
    endpoint: str | None = None,
) -> None:
    """Send gateway spans to a Phoenix collector.

    Requires the `observability` extra (arize-phoenix-otel).

    Args:
        project_name: Name of the project in Phoenix dashboard.
        endpoint: Phoenix collector endpoint. Defaults to local Phoenix server.
    """
    from phoenix.otel import register

    collector_endpoint = endpoint or os.getenv(
        "PHOENIX_COLLECTOR_ENDPOINT",
        "http://localhost:6006/v1/traces"
    )

    tracer_provider = register(
        project_name=project_name,
        endpoint=collector_endpoint,
    )

    global _tracer
    _tracer = trace.get_tracer(TRACER_NAME, tracer_provider=tracer_provider)

    logger.info(f"Tracing initialized for project {project_name}, sending to {collector_endpoint}")


def _serialize_value(value: Any) -> str:
    """Serialize a value to string for span attributes."""
    if hasattr(value, "model_dump"):
        value = value.model_dump()
    elif isinstance(value, list):
        value = [v.model_dump() if hasattr(v, "model_dump") else v for v in value]
    try:
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False, default=str)
        return str(value)
    except (TypeError, ValueError):
        return str(value)


def _mark_failed(span: trace.Span, e: Exception) -> None:
    """Record an exception on a span before it propagates."""
    span.set_status(Status(StatusCode.ERROR, str(e)))
    span.set_attribute("error.type", type(e).__name__)
    span.set_attribute("error.message", str(e))


def trace_tool(
    name: str | None = None,
    capture_input: bool = True,
    capture_output: bool = True,
) -> Callable[[F], F]:
    """Decorator to trace an outbound call or store operation.

    Creates a span that records the call's arguments and return value.
    Works on both plain and coroutine functions.

    Args:
        name: Custom span name. Defaults to function name.
        capture_input: Whether to capture input arguments. Defaults to True.
        capture_output: Whether to capture return value. Defaults to True.

    Returns:
        Decorated function with tracing.

    Example:
        @trace_tool(name="db.record")
        def record(self, city: str, temperature: float, description: str):
            ...
    """
    def decorator(func: F) -> F:
        span_name = name or f"tool.{func.__name__}"

        def _start(span: trace.Span, kind: str, args: tuple, kwargs: dict) -> None:
            span.set_attribute("tool.name", func.__name__)
            span.set_attribute("tool.type", kind)
            if capture_input:
                # Drop the bound instance for methods
                if args and hasattr(args[0], func.__name__):
                    args = args[1:]
                if args:
                    span.set_attribute("input.args", _serialize_value(list(args)))
                if kwargs:
                    span.set_attribute("input.kwargs", _serialize_value(kwargs))

        def _finish(span: trace.Span, result: Any) -> None:
            if capture_output and result is not None:
                span.set_attribute("output.result", _serialize_value(result))
            span.set_status(Status(StatusCode.OK))

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(span_name) as span:
                _start(span, "sync", args, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _mark_failed(span, e)
                    raise
                _finish(span, result)
                return result

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(span_name) as span:
                _start(span, "async", args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _mark_failed(span, e)
                    raise
                _finish(span, result)
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator


def trace_span(name: str) -> Callable[[F], F]:
    """Decorator that opens a named span around a service operation.

    Failures are recorded the same way `trace_tool` records them.

    Args:
        name: Span name.

    Returns:
        Decorated function with tracing.
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(name) as span:
                span.set_attribute("function.name", func.__name__)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _mark_failed(span, e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with get_tracer().start_as_current_span(name) as span:
                span.set_attribute("function.name", func.__name__)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _mark_failed(span, e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
