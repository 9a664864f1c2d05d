"""Exception types raised by the docbundle pipeline."""

from pathlib import Path
from typing import Optional


class DocbundleError(Exception):
    """Base class for docbundle errors."""


class LockFileError(DocbundleError):
    """The lock file exists but does not hold a JSON object of checksums."""

    def __init__(self, lock_file: Path, reason: str):
        self.lock_file = Path(lock_file)
        self.reason = reason
        super().__init__(f"Invalid lock file {self.lock_file}: {reason}")


class ProviderConfigError(DocbundleError):
    """A text provider could not be built from its settings."""


class TransformError(DocbundleError):
    """The external text transform failed for a document."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        path: Optional[str] = None,
    ):
        self.provider = provider
        self.path = path
        super().__init__(message)


class ClaudeResponseError(DocbundleError):
    """The Claude agent reported an error turn or an error result."""

    def __init__(
        self,
        message: str,
        error_type: Optional[str] = None,
        api_error_status: Optional[int] = None,
    ):
        self.error_type = error_type
        self.api_error_status = api_error_status
        super().__init__(message)


class EmptyCompletionError(DocbundleError):
    """A provider finished streaming without producing any text."""
