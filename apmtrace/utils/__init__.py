"""Utility functions for apmtrace."""

from apmtrace.utils.helpers import (
    format_trace_id,
    format_span_id,
    generate_trace_id,
    generate_span_id,
)

__all__ = [
    "format_trace_id",
    "format_span_id",
    "generate_trace_id",
    "generate_span_id",
]
