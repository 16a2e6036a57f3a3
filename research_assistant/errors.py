"""
Exception types shared across the package.
"""


class ResearchAssistantError(Exception):
    """Base class for all package errors."""


class ValidationError(ResearchAssistantError, ValueError):
    """Caller-supplied input violates a precondition."""


class UpstreamError(ResearchAssistantError, RuntimeError):
    """The generative-language service failed or returned nothing usable."""


class StoreError(ResearchAssistantError):
    """A persisted project file could not be read or written."""
