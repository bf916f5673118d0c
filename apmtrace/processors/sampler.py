"""Sampling decisions for traces."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from apmtrace.tracer.trace import Trace


@dataclass
class SamplingResult:
    sampled: bool


class Sampler:
    """Base sampler; decides once per trace, when its root span starts."""

    def should_sample(self, trace: Optional["Trace"] = None) -> SamplingResult:
        raise NotImplementedError


class AlwaysSample(Sampler):
    def should_sample(self, trace: Optional["Trace"] = None) -> SamplingResult:
        return SamplingResult(sampled=True)


class NeverSample(Sampler):
    def should_sample(self, trace: Optional["Trace"] = None) -> SamplingResult:
        return SamplingResult(sampled=False)


class PercentageSampler(Sampler):
    """Head-based sampler keeping a fixed percentage of traces."""

    def __init__(self, percentage: float = 100.0) -> None:
        if not 0.0 <= percentage <= 100.0:
            raise ValueError("percentage must be between 0 and 100")
        self.percentage = percentage

    def should_sample(self, trace: Optional["Trace"] = None) -> SamplingResult:
        return SamplingResult(sampled=random.random() * 100.0 < self.percentage)
