"""Identifier generation and formatting helpers."""

from __future__ import annotations

from typing import Optional

from opentelemetry.sdk.trace.id_generator import IdGenerator, RandomIdGenerator

_default_generator = RandomIdGenerator()


def format_trace_id(trace_id: int) -> str:
    """
    Format an integer trace id as a hex string.
    
    Args:
        trace_id: trace id as a 128-bit integer
    
    Returns:
        32-character hex string
    """
    return format(trace_id, '032x')


def format_span_id(span_id: int) -> str:
    """
    Format an integer span id as a hex string.
    
    Args:
        span_id: span id as a 64-bit integer
    
    Returns:
        16-character hex string
    """
    return format(span_id, '016x')


def generate_trace_id(id_generator: Optional[IdGenerator] = None) -> str:
    """Return a fresh trace id as a hex string."""
    generator = id_generator or _default_generator
    return format_trace_id(generator.generate_trace_id())


def generate_span_id(id_generator: Optional[IdGenerator] = None) -> str:
    """
    Return a fresh span id as a hex string.
    
    Also used for the per-injection correlation ids.
    """
    generator = id_generator or _default_generator
    return format_span_id(generator.generate_span_id())
