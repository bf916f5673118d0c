"""Trace structure: an ordered list of typed nodes, root first."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from apmtrace import constants

if TYPE_CHECKING:
    from apmtrace.tracer.span import Span
    from apmtrace.tracer.span_context import SpanContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationIdentifier:
    value: Optional[str]
    scope: str = constants.CORR_ID_SCOPE_INTERACTION


@dataclass
class TraceNode:
    span: Optional["Span"]
    node_type: str = constants.NODE_TYPE_COMPONENT
    correlation_ids: List[CorrelationIdentifier] = field(default_factory=list)

    def get_span(self) -> Optional["Span"]:
        return self.span


class Trace:
    """
    One logical distributed operation as seen from this process.

    Nodes are append-only. Appends and retyping go through a lock since
    concurrent inject calls may target the same trace.
    """

    def __init__(
        self,
        trace_id: str,
        transaction: Optional[str] = None,
        level: Optional[str] = None,
    ) -> None:
        self.trace_id = trace_id
        self.transaction = transaction
        self.level = level
        self.sampled = True
        self.nodes: List[TraceNode] = []
        self._lock = threading.Lock()
        self._sealed = False

    @property
    def root(self) -> Optional[TraceNode]:
        return self.nodes[0] if self.nodes else None

    @property
    def sealed(self) -> bool:
        return self._sealed

    def add_node(self, span: "Span", node_type: str = constants.NODE_TYPE_COMPONENT) -> TraceNode:
        node = TraceNode(span=span, node_type=node_type)
        with self._lock:
            if self._sealed:
                logger.debug(
                    "Span added to sealed trace %s; it will not be recorded", self.trace_id
                )
            self.nodes.append(node)
        return node

    def find_node(self, span_context: "SpanContext") -> Optional[TraceNode]:
        for node in self.nodes:
            if node.span is not None and node.span.context().span_id == span_context.span_id:
                return node
        return None

    def set_node_type(
        self,
        node_type: str,
        span_context: "SpanContext",
        correlation: Optional[CorrelationIdentifier] = None,
    ) -> Optional[TraceNode]:
        """
        Retype the node owning ``span_context`` and attach a correlation id.

        Returns the node, or None if the context does not belong to this trace.
        """
        with self._lock:
            node = self.find_node(span_context)
            if node is None:
                return None
            node.node_type = node_type
            if correlation is not None:
                node.correlation_ids.append(correlation)
            return node

    def span_finished(self) -> bool:
        """
        Report whether every span in the trace has now finished.

        Returns True exactly once, when the trace becomes sealed.
        """
        with self._lock:
            if self._sealed:
                return False
            if all(node.span is None or node.span.finished for node in self.nodes):
                self._sealed = True
                return True
            return False

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        return f"Trace(trace_id={self.trace_id!r}, nodes={len(self.nodes)})"
