"""Propagatable span identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from apmtrace.tracer.trace import Trace


@dataclass
class SpanContext:
    span_id: Optional[str] = None
    trace_id: Optional[str] = None
    parent_id: Optional[str] = None
    transaction: Optional[str] = None
    level: Optional[str] = None
    consumer_correlation_id: Optional[str] = None
    # Owning trace; None for contexts recovered from a carrier
    trace: Optional["Trace"] = field(default=None, compare=False, repr=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "span_id" and self.__dict__.get("span_id") is not None:
            raise AttributeError("span_id cannot be reassigned")
        super().__setattr__(name, value)

    def get_trace(self) -> Optional["Trace"]:
        return self.trace

    def is_valid(self) -> bool:
        return bool(self.trace_id and self.span_id)

    def has_remote_parent(self) -> bool:
        """True for a context recovered from a carrier that named a trace."""
        return self.trace is None and self.trace_id is not None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "span_id": self.span_id,
            "trace_id": self.trace_id,
            "parent_id": self.parent_id,
            "transaction": self.transaction,
            "level": self.level,
            "consumer_correlation_id": self.consumer_correlation_id,
        }


@runtime_checkable
class SupportsContext(Protocol):
    """Anything exposing its span identity through ``context()``."""

    def context(self) -> SpanContext:
        ...


def resolve_context(value: Any) -> Optional[SpanContext]:
    """Normalize a SpanContext or a span-like value to a SpanContext."""
    if isinstance(value, SpanContext):
        return value
    if isinstance(value, SupportsContext):
        resolved = value.context()
        if isinstance(resolved, SpanContext):
            return resolved
    return None
