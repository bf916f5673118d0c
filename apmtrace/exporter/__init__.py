"""Recorders for completed traces."""

from apmtrace.exporter.recorders import ConsoleRecorder, LoggingRecorder, Recorder

__all__ = ["Recorder", "ConsoleRecorder", "LoggingRecorder"]
