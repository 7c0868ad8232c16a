"""
Plum Health Profiler – Error Taxonomy
======================================
Exceptions raised across the profiling pipeline.

Only ClientInputError and ExtractionError ever reach the request boundary;
ServiceError is always recovered inside the stage that raised it.
"""


class ProfilerError(Exception):
    """Base exception for all profiler errors."""


class ClientInputError(ProfilerError):
    """Raised when the request carries neither text nor an image."""


class ExtractionError(ProfilerError):
    """Raised when OCR cannot extract text from an uploaded image."""


class ServiceError(ProfilerError):
    """Raised when the text-generation service fails or returns malformed output."""
