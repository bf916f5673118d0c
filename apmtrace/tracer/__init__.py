"""Tracer components for apmtrace."""

from apmtrace.tracer.span_context import SpanContext, SupportsContext
from apmtrace.tracer.trace import CorrelationIdentifier, Trace, TraceNode
from apmtrace.tracer.span import Reference, Span, child_of, follows_from
from apmtrace.tracer.tracer import Tracer

__all__ = [
    "Span",
    "SpanContext",
    "SupportsContext",
    "Reference",
    "child_of",
    "follows_from",
    "Trace",
    "TraceNode",
    "CorrelationIdentifier",
    "Tracer",
]
