"""Span implementation: a timed unit of work belonging to a Trace."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from apmtrace import constants
from apmtrace.tracer.span_context import SpanContext, resolve_context
from apmtrace.tracer.trace import CorrelationIdentifier, Trace
from apmtrace.utils.helpers import generate_span_id, generate_trace_id

if TYPE_CHECKING:
    from apmtrace.tracer.tracer import Tracer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reference:
    """A causal link from a new span to an existing SpanContext."""

    type: str
    referenced_context: Optional[SpanContext]


def child_of(parent: Any) -> Reference:
    return Reference(constants.REFERENCE_CHILD_OF, resolve_context(parent))


def follows_from(parent: Any) -> Reference:
    return Reference(constants.REFERENCE_FOLLOWS_FROM, resolve_context(parent))


def _now_millis() -> float:
    return time.time() * 1000.0


def _level_from_priority(priority: Any) -> str:
    try:
        return constants.LEVEL_NONE if float(priority) <= 0 else constants.LEVEL_ALL
    except (TypeError, ValueError):
        return constants.LEVEL_ALL


class Span:
    """
    A span bound to a Tracer.

    Spans sharing a local parent share its Trace. A span started from an
    extracted (remote) context opens a new Trace whose root node is a consumer
    of the remote producer's correlation id.
    """

    def __init__(
        self,
        tracer: "Tracer",
        operation_name: str,
        child_of: Optional[Any] = None,
        references: Optional[Sequence[Reference]] = None,
        tags: Optional[Dict[str, Any]] = None,
        start_time: Optional[float] = None,
    ) -> None:
        """
        Initialize span.

        Args:
            tracer: owning Tracer
            operation_name: name of the unit of work
            child_of: parent SpanContext, or a span exposing ``context()``
            references: explicit causal references
            tags: initial tags; the mapping is adopted, not copied
            start_time: milliseconds since epoch, fractions allowed
        """
        self.tracer = tracer
        self.operation_name = operation_name
        self.start_time = start_time if start_time is not None else _now_millis()
        self.finish_time: Optional[float] = None
        self.logs: List[Dict[str, Any]] = []
        self._tags: Dict[str, Any] = tags if tags is not None else {}

        if child_of is not None:
            references = [Reference(constants.REFERENCE_CHILD_OF, resolve_context(child_of))]
        parent_ref = self._primary_reference(references or [])
        self._context = self._build_context(parent_ref)
        self._link_references(references or [])

        for key in (constants.TAG_TRANSACTION, constants.TAG_SAMPLING_PRIORITY):
            if key in self._tags:
                self._apply_special_tag(key, self._tags[key])

    @staticmethod
    def _primary_reference(references: Sequence[Reference]) -> Optional[Reference]:
        usable = [ref for ref in references if ref.referenced_context is not None]
        for ref in usable:
            if ref.type == constants.REFERENCE_CHILD_OF:
                return ref
        return usable[0] if usable else None

    def _build_context(self, parent_ref: Optional[Reference]) -> SpanContext:
        id_generator = self.tracer.get_id_generator()
        span_id = generate_span_id(id_generator)
        parent = parent_ref.referenced_context if parent_ref else None

        if parent is not None and parent.trace is not None:
            trace = parent.trace
            context = SpanContext(
                span_id=span_id,
                trace_id=parent.trace_id,
                parent_id=parent.span_id,
                transaction=parent.transaction,
                level=parent.level,
                trace=trace,
            )
            # Assigned before the node is visible to other threads
            self._context = context
            self._node = trace.add_node(self)
            return context

        if parent is not None and parent.trace_id is not None:
            trace = Trace(parent.trace_id, parent.transaction, parent.level)
            node_type = constants.NODE_TYPE_CONSUMER
        else:
            trace = Trace(generate_trace_id(id_generator))
            node_type = constants.NODE_TYPE_COMPONENT

        context = SpanContext(
            span_id=span_id,
            trace_id=trace.trace_id,
            transaction=trace.transaction,
            level=trace.level,
            trace=trace,
        )
        self._context = context
        self._node = trace.add_node(self, node_type)
        if parent is not None and parent.consumer_correlation_id is not None:
            self._node.correlation_ids.append(
                CorrelationIdentifier(parent.consumer_correlation_id, constants.CORR_ID_SCOPE_INTERACTION)
            )
        trace.sampled = self._decide_sampling(trace)
        return context

    def _link_references(self, references: Sequence[Reference]) -> None:
        for ref in references:
            if ref.referenced_context is None:
                continue
            if ref.type == constants.REFERENCE_FOLLOWS_FROM and ref.referenced_context.span_id:
                self._node.correlation_ids.append(
                    CorrelationIdentifier(ref.referenced_context.span_id, constants.CORR_ID_SCOPE_CAUSED_BY)
                )

    def _decide_sampling(self, trace: Trace) -> bool:
        if trace.level == constants.LEVEL_NONE:
            return False
        if trace.level == constants.LEVEL_ALL:
            return True
        return bool(self.tracer.get_sampler().should_sample(trace).sampled)

    def _apply_special_tag(self, key: str, value: Any) -> None:
        trace = self._context.trace
        if key == constants.TAG_TRANSACTION:
            self._context.transaction = value
            if trace is not None and trace.transaction is None:
                trace.transaction = value
        elif key == constants.TAG_SAMPLING_PRIORITY:
            level = _level_from_priority(value)
            self._context.level = level
            if trace is not None:
                trace.level = level
                trace.sampled = level != constants.LEVEL_NONE

    # Identity

    def context(self) -> SpanContext:
        return self._context

    def get_trace(self) -> Trace:
        return self._context.trace

    def get_trace_id(self) -> Optional[str]:
        return self._context.trace_id

    def get_transaction(self) -> Optional[str]:
        return self._context.transaction

    def get_level(self) -> Optional[str]:
        return self._context.level

    def get_node_type(self) -> str:
        return self._node.node_type

    # Tags and logs

    def set_operation_name(self, name: str) -> "Span":
        self.operation_name = name
        return self

    def set_tag(self, key: str, value: Any) -> "Span":
        self._tags[key] = value
        if key in (constants.TAG_TRANSACTION, constants.TAG_SAMPLING_PRIORITY):
            self._apply_special_tag(key, value)
        return self

    def get_tag(self, key: str, default: Any = None) -> Any:
        return self._tags.get(key, default)

    def get_tags(self) -> Dict[str, Any]:
        return self._tags

    def log_kv(self, key_values: Dict[str, Any], timestamp: Optional[float] = None) -> "Span":
        self.logs.append({
            "timestamp": timestamp if timestamp is not None else _now_millis(),
            "fields": dict(key_values),
        })
        return self

    # Lifecycle

    @property
    def finished(self) -> bool:
        return self.finish_time is not None

    @property
    def duration(self) -> Optional[float]:
        """Duration in milliseconds, or None while the span is open."""
        if self.finish_time is None:
            return None
        return self.finish_time - self.start_time

    def finish(self, finish_time: Optional[float] = None) -> None:
        """
        Finish the span.

        When this completes the trace, the tracer's trace decorator runs on it
        and, if the trace is sampled, it is handed to the recorder.
        """
        if self.finished:
            return
        self.finish_time = finish_time if finish_time is not None else _now_millis()

        trace = self._context.trace
        if trace is None or not trace.span_finished():
            return
        self.tracer.get_trace_decorator()(trace)
        if not trace.sampled:
            return
        try:
            self.tracer.get_recorder().record(trace)
        except Exception:
            # Recorders should not crash tracing
            logger.exception("Recorder failed for trace %s", trace.trace_id)

    def __enter__(self) -> "Span":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc:
            self.set_tag("error", True)
            self.log_kv({"event": "error", "error.kind": exc_type.__name__, "message": str(exc)})
        self.finish()
        return False

    def __repr__(self) -> str:
        return (
            f"Span(operation_name={self.operation_name!r}, "
            f"trace_id={self._context.trace_id!r}, span_id={self._context.span_id!r})"
        )
