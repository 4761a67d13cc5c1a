"""Observability module for the weather gateway.

Spans go through the OpenTelemetry API; Arize Phoenix collects them when
tracing is enabled.
"""

from .instrumentation import init_tracing, trace_span, trace_tool

__all__ = ["init_tracing", "trace_tool", "trace_span"]
