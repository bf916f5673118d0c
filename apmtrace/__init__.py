"""apmtrace: distributed-tracing client with pluggable carrier formats."""

from apmtrace import constants
from apmtrace.constants import FORMAT_BINARY, FORMAT_HTTP_HEADERS, FORMAT_TEXT_MAP
from apmtrace.deployment import DEFAULT_META_DATA, DeploymentMetaData, make_trace_decorator
from apmtrace.errors import (
    ApmTraceError,
    ConfigError,
    InvalidCarrierError,
    InvalidSpanContextError,
    UnsupportedFormatError,
)
from apmtrace.exporter import ConsoleRecorder, LoggingRecorder, Recorder
from apmtrace.processors import AlwaysSample, NeverSample, PercentageSampler, Sampler, SamplingResult
from apmtrace.tracer import (
    CorrelationIdentifier,
    Reference,
    Span,
    SpanContext,
    Trace,
    TraceNode,
    Tracer,
    child_of,
    follows_from,
)
from apmtrace.context import CarrierCodec, CodecRegistry, TextMapCodec, default_codecs
from apmtrace.config import build_tracer, load_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "constants",
    "FORMAT_TEXT_MAP",
    "FORMAT_HTTP_HEADERS",
    "FORMAT_BINARY",
    "Tracer",
    "Span",
    "SpanContext",
    "Reference",
    "child_of",
    "follows_from",
    "Trace",
    "TraceNode",
    "CorrelationIdentifier",
    "CarrierCodec",
    "CodecRegistry",
    "TextMapCodec",
    "default_codecs",
    "DeploymentMetaData",
    "DEFAULT_META_DATA",
    "make_trace_decorator",
    "Recorder",
    "ConsoleRecorder",
    "LoggingRecorder",
    "Sampler",
    "SamplingResult",
    "AlwaysSample",
    "NeverSample",
    "PercentageSampler",
    "ApmTraceError",
    "ConfigError",
    "InvalidCarrierError",
    "InvalidSpanContextError",
    "UnsupportedFormatError",
    "build_tracer",
    "load_config",
]
