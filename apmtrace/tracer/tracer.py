"""Tracer: span creation and cross-process context propagation."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from opentelemetry.sdk.trace.id_generator import IdGenerator, RandomIdGenerator

from apmtrace import constants
from apmtrace.context.propagators import CodecRegistry, default_codecs
from apmtrace.deployment import DEFAULT_META_DATA, DeploymentMetaData, TraceDecorator, make_trace_decorator
from apmtrace.errors import ApmTraceError
from apmtrace.exporter.recorders import ConsoleRecorder, Recorder
from apmtrace.processors.sampler import AlwaysSample, Sampler
from apmtrace.tracer.span import Reference, Span
from apmtrace.tracer.span_context import SpanContext, resolve_context
from apmtrace.tracer.trace import CorrelationIdentifier
from apmtrace.utils.helpers import generate_span_id

# Values that can never act as a carrier
_SCALAR_TYPES = (str, bytes, int, float, bool)


class Tracer:
    """
    Creates spans and moves their identity across process boundaries.

    Collaborators are fixed at construction. Propagation failures never reach
    the caller: they are reported on the diagnostics logger and the call
    degrades to a no-op.
    """

    def __init__(
        self,
        recorder: Optional[Recorder] = None,
        sampler: Optional[Sampler] = None,
        deployment_meta_data: Optional[DeploymentMetaData] = None,
        id_generator: Optional[IdGenerator] = None,
        codecs: Optional[CodecRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize tracer.

        Args:
            recorder: sink for completed traces (default: ConsoleRecorder)
            sampler: sampling policy for new traces (default: AlwaysSample)
            deployment_meta_data: metadata applied to root spans
                (default: read from the environment at import)
            id_generator: OpenTelemetry id generator for span, trace and
                correlation ids (default: RandomIdGenerator)
            codecs: carrier codec registry (default: text map and HTTP headers)
            logger: diagnostics channel
        """
        self._recorder = recorder or ConsoleRecorder()
        self._sampler = sampler or AlwaysSample()
        self._deployment_meta_data = deployment_meta_data or DEFAULT_META_DATA
        self._id_generator = id_generator or RandomIdGenerator()
        self._codecs = codecs if codecs is not None else default_codecs(self._id_generator)
        self._logger = logger or logging.getLogger("apmtrace.tracer")
        self._trace_decorator = make_trace_decorator(self._deployment_meta_data)

    def get_sampler(self) -> Sampler:
        return self._sampler

    def get_recorder(self) -> Recorder:
        return self._recorder

    def get_trace_decorator(self) -> TraceDecorator:
        return self._trace_decorator

    def get_deployment_meta_data(self) -> DeploymentMetaData:
        return self._deployment_meta_data

    def get_id_generator(self) -> IdGenerator:
        return self._id_generator

    def get_codecs(self) -> CodecRegistry:
        return self._codecs

    def start_span(
        self,
        name: str,
        operation_name: Optional[str] = None,
        child_of: Optional[Any] = None,
        references: Optional[Sequence[Reference]] = None,
        tags: Optional[Dict[str, Any]] = None,
        start_time: Optional[float] = None,
    ) -> Span:
        """
        Start a new span.

        Example::

            parent = tracer.start_span("DoWork")
            child = tracer.start_span("Subroutine", child_of=parent.context())

        Args:
            name: operation name, used unless ``operation_name`` is given
            operation_name: explicit operation name
            child_of: parent SpanContext (or span) of the new span
            references: causal references; ignored when ``child_of`` is set
            tags: initial tags; ownership passes to the span
            start_time: milliseconds since epoch, fractions allowed

        Returns:
            The new Span
        """
        if child_of is not None and references:
            self._logger.warning(
                "start_span(%r) given both child_of and references; references ignored", name
            )
            references = None
        return Span(
            self,
            operation_name or name,
            child_of=child_of,
            references=references,
            tags=tags,
            start_time=start_time,
        )

    def inject(self, span_context: Any, format: str, carrier: Any) -> None:
        """
        Write ``span_context`` into ``carrier`` for cross-process propagation.

        A span may be passed instead of its context. Every call mints a new
        correlation id and records the owning trace node as a producer of it,
        even when ``format`` has no codec (in which case the carrier is left
        untouched).

        Example::

            headers = {}
            tracer.inject(client_span, FORMAT_HTTP_HEADERS, headers)
            outbound_request.headers.update(headers)
        """
        if carrier is None:
            self._logger.warning("Carrier should not be None")
            return
        if isinstance(carrier, _SCALAR_TYPES):
            self._logger.warning("Carrier is not an object: %s", type(carrier).__name__)
            return

        context = resolve_context(span_context)
        if context is None:
            self._logger.warning("Cannot inject %r: no span context", span_context)
            return

        if format in self._codecs:
            try:
                correlation_id = self._codecs.get_codec(format).inject(context, carrier)
            except ApmTraceError as e:
                self._logger.warning("Inject failed: %s", e)
                return
        else:
            self._logger.warning("Inject unknown format: %r", format)
            correlation_id = generate_span_id(self._id_generator)

        trace = context.get_trace()
        if trace is None:
            self._logger.debug("Context %s has no local trace; producer node not recorded", context.span_id)
            return
        trace.set_node_type(
            constants.NODE_TYPE_PRODUCER,
            context,
            CorrelationIdentifier(correlation_id, constants.CORR_ID_SCOPE_INTERACTION),
        )

    def extract(self, format: str, carrier: Any) -> SpanContext:
        """
        Recover a remote parent context from ``carrier``.

        Never returns None: when nothing can be recovered the result is an
        empty SpanContext, and ``trace_id is None`` means no remote parent.

        Example::

            wire_context = tracer.extract(FORMAT_HTTP_HEADERS, request.headers)
            server_span = tracer.start_span("handle", child_of=wire_context)
        """
        if format not in self._codecs:
            self._logger.warning("Extract unknown format: %r", format)
            return SpanContext()
        try:
            return self._codecs.get_codec(format).extract(carrier)
        except ApmTraceError as e:
            self._logger.warning("Extract failed: %s", e)
            return SpanContext()
