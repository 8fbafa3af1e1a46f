"""Exception hierarchy for the log scrubber."""

from typing import Optional


class ScrubberError(Exception):
    """Base exception for every error the scrubber surfaces to its caller."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class ConfigurationError(ScrubberError):
    """Invalid configuration file or resolved settings."""


class OperationCancelledError(ScrubberError):
    """A file conflict was resolved to 'cancel'."""


class PipelineIOError(ScrubberError):
    """Input could not be read or output could not be written."""
