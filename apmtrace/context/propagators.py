"""Carrier codecs translating a SpanContext to and from a flat key-value carrier."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Iterator, Optional

from opentelemetry.sdk.trace.id_generator import IdGenerator

from apmtrace import constants
from apmtrace.errors import InvalidCarrierError, InvalidSpanContextError, UnsupportedFormatError
from apmtrace.tracer.span_context import SpanContext
from apmtrace.utils.helpers import generate_span_id


class CarrierCodec(ABC):
    """Strategy for one carrier format."""

    def __init__(self, id_generator: Optional[IdGenerator] = None) -> None:
        self.id_generator = id_generator

    @abstractmethod
    def inject(self, span_context: SpanContext, carrier: Any) -> str:
        """Write ``span_context`` into ``carrier`` and return the correlation id written."""

    @abstractmethod
    def extract(self, carrier: Any) -> SpanContext:
        """Recover a remote parent context from ``carrier``."""


class TextMapCodec(CarrierCodec):
    """
    Codec for string-keyed carriers (text maps and HTTP headers).

    Inject always writes the trace id and a correlation id minted for this
    call; transaction and level only when the context defines them. Extract
    matches key names case-insensitively and ignores keys it does not know.
    """

    def inject(self, span_context: SpanContext, carrier: Any) -> str:
        if not isinstance(carrier, MutableMapping):
            raise InvalidCarrierError(
                "Carrier is not a writable mapping",
                {"carrier_type": type(carrier).__name__},
            )
        if span_context.trace_id is None:
            raise InvalidSpanContextError(
                "Span context has no trace id",
                {"span_id": span_context.span_id},
            )
        correlation_id = generate_span_id(self.id_generator)
        carrier[constants.CARRIER_TRACE_ID] = span_context.trace_id
        carrier[constants.CARRIER_CORRELATION_ID] = correlation_id
        if span_context.transaction:
            carrier[constants.CARRIER_TRANSACTION] = span_context.transaction
        if span_context.level:
            carrier[constants.CARRIER_LEVEL] = span_context.level
        return correlation_id

    def extract(self, carrier: Any) -> SpanContext:
        if not isinstance(carrier, Mapping):
            raise InvalidCarrierError(
                "Carrier is not a mapping",
                {"carrier_type": type(carrier).__name__},
            )
        found: Dict[str, Any] = {}
        for key, value in carrier.items():
            if isinstance(key, str):
                found[key.upper()] = value

        return SpanContext(
            span_id=generate_span_id(self.id_generator),
            trace_id=found.get(constants.CARRIER_TRACE_ID),
            transaction=found.get(constants.CARRIER_TRANSACTION),
            level=found.get(constants.CARRIER_LEVEL),
            consumer_correlation_id=found.get(constants.CARRIER_CORRELATION_ID),
        )


class CodecRegistry(Mapping):
    """Finite registry of carrier codecs keyed by format identifier."""

    def __init__(self, codecs: Optional[Mapping[str, CarrierCodec]] = None) -> None:
        self._codecs: Dict[str, CarrierCodec] = dict(codecs or {})

    def register(self, format: str, codec: CarrierCodec) -> None:
        self._codecs[format] = codec

    def get_codec(self, format: str) -> CarrierCodec:
        try:
            return self._codecs[format]
        except (KeyError, TypeError):
            raise UnsupportedFormatError("Unsupported carrier format", {"format": format}) from None

    def formats(self):
        return list(self._codecs)

    def __contains__(self, format: object) -> bool:
        try:
            return format in self._codecs
        except TypeError:
            return False

    def __getitem__(self, format: str) -> CarrierCodec:
        return self._codecs[format]

    def __iter__(self) -> Iterator[str]:
        return iter(self._codecs)

    def __len__(self) -> int:
        return len(self._codecs)


def default_codecs(id_generator: Optional[IdGenerator] = None) -> CodecRegistry:
    """Registry with the text map codec bound to both text formats."""
    text_map = TextMapCodec(id_generator)
    return CodecRegistry({
        constants.FORMAT_TEXT_MAP: text_map,
        constants.FORMAT_HTTP_HEADERS: text_map,
    })
