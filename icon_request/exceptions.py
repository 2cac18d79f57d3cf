"""
Defines custom exceptions for the application to allow for more specific error handling.

Every pipeline failure carries an `ErrorKind` so that it can be reported to the
caller as a single outcome value.
"""

from pathlib import Path

from icon_request.models.outcome import ErrorKind


class IconRequestError(Exception):
    """Base exception for all application-specific errors."""

    kind: ErrorKind | None = None
    # Set when the failure happened after the request archive was created
    archive: Path | None = None


class EmptySelectionError(IconRequestError):
    """Raised when a request is sent without any selected apps."""

    kind = ErrorKind.EMPTY_SELECTION


class NoDeliveryTargetError(IconRequestError):
    """Raised when neither an email recipient nor an API key is configured."""

    kind = ErrorKind.NO_DELIVERY_TARGET


class StagingUnavailableError(IconRequestError):
    """Raised when the staging (cache) folder cannot be found or created."""

    kind = ErrorKind.STAGING_UNAVAILABLE


class IconWriteFailedError(IconRequestError):
    """Raised when an app icon cannot be rendered, encoded or written to disk."""

    kind = ErrorKind.ICON_WRITE_FAILED


class ManifestWriteFailedError(IconRequestError):
    """Raised when an appfilter manifest file cannot be written."""

    kind = ErrorKind.MANIFEST_WRITE_FAILED


class NoContentError(IconRequestError):
    """Raised when there are no files to put into the archive."""

    kind = ErrorKind.NO_CONTENT


class ArchiveFailedError(IconRequestError):
    """Raised when the request ZIP archive cannot be created."""

    kind = ErrorKind.ARCHIVE_FAILED


class RemoteError(IconRequestError):
    """Base class for failures of the remote request manager API."""


class RemoteTransportError(RemoteError):
    """
    Raised for connection errors, timeouts, HTTP failures or response bodies
    that cannot be parsed.
    """

    kind = ErrorKind.REMOTE_TRANSPORT_ERROR


class RemoteApplicationError(RemoteError):
    """Raised when the remote API answers with an 'error' status."""

    kind = ErrorKind.REMOTE_APPLICATION_ERROR


class HandoffFailedError(IconRequestError):
    """Raised when the share target rejects or fails the handoff."""

    kind = ErrorKind.HANDOFF_FAILED


class ConfigurationError(IconRequestError):
    """Raised for issues related to configuration loading or validation."""
