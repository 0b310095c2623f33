"""
Exception types raised by the pipeline.

Every failure aborts the run; callers see one of these, with the
underlying library exception chained as ``__cause__`` where there is one.
"""


class ArxivPipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(ArxivPipelineError):
    """A required credential or endpoint is missing."""


class SourceValidationError(ArxivPipelineError, ValueError):
    """The source URL does not point at a PDF."""


class NetworkError(ArxivPipelineError):
    """Fetching the source PDF failed."""


class PageIndexError(ArxivPipelineError, IndexError):
    """A page to delete is out of range, or the selector is not ascending."""


class ExtractionServiceError(ArxivPipelineError):
    """A remote service (extraction, LLM, vector store) reported a failure."""


class ResponseParseError(ArxivPipelineError):
    """The LLM response does not match the expected note schema."""
