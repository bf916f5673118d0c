"""Context propagation for apmtrace."""

from apmtrace.context.propagators import (
    CarrierCodec,
    CodecRegistry,
    TextMapCodec,
    default_codecs,
)

__all__ = [
    "CarrierCodec",
    "CodecRegistry",
    "TextMapCodec",
    "default_codecs",
]
