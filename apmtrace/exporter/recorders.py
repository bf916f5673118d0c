"""Recorders: sinks receiving completed traces."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from apmtrace.tracer.span import Span
    from apmtrace.tracer.trace import Trace


def _describe(span: "Span", node_type: str) -> str:
    context = span.context()
    line = (
        f"name={span.operation_name} type={node_type} trace_id={context.trace_id} "
        f"span_id={context.span_id} parent_id={context.parent_id} "
        f"duration_ms={span.duration}"
    )
    tags = span.get_tags()
    if tags:
        line += f" tags={tags}"
    return line


class Recorder:
    """Base recorder interface. The return value of ``record`` is ignored."""

    def record(self, trace: "Trace") -> None:
        raise NotImplementedError


class ConsoleRecorder(Recorder):
    """Simple recorder that prints spans to stdout (or provided stream)."""

    def __init__(self, stream=None) -> None:
        self.stream = stream or sys.stdout

    def record(self, trace: "Trace") -> None:
        for node in trace.nodes:
            if node.span is None:
                continue
            print(f"[span] {_describe(node.span, node.node_type)}", file=self.stream)


class LoggingRecorder(Recorder):
    """Logs a summary line per span using the standard logging module."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("apmtrace.traces")

    def record(self, trace: "Trace") -> None:
        for node in trace.nodes:
            if node.span is None:
                continue
            self.logger.info("[trace] %s", _describe(node.span, node.node_type))
