"""apmtrace error hierarchy and exceptions."""

from __future__ import annotations


class ApmTraceError(Exception):
    """Base exception for all apmtrace errors."""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(ApmTraceError):
    """Raised when configuration is invalid or conflicting."""
    pass


class InvalidCarrierError(ApmTraceError):
    """Raised when a carrier cannot be read from or written to."""
    pass


class UnsupportedFormatError(ApmTraceError):
    """Raised when no codec is registered for a carrier format."""
    pass


class InvalidSpanContextError(ApmTraceError):
    """Raised when a span context lacks the identity needed for propagation."""
    pass
