"""Sampling policies."""

from apmtrace.processors.sampler import (
    AlwaysSample,
    NeverSample,
    PercentageSampler,
    Sampler,
    SamplingResult,
)

__all__ = [
    "Sampler",
    "SamplingResult",
    "AlwaysSample",
    "NeverSample",
    "PercentageSampler",
]
