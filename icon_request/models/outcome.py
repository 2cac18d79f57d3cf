"""
The single result value emitted by one send operation.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from icon_request.exceptions import IconRequestError


class ErrorKind(str, Enum):
    """Terminal failure kinds of the request pipeline."""

    EMPTY_SELECTION = "EmptySelection"
    NO_DELIVERY_TARGET = "NoDeliveryTarget"
    STAGING_UNAVAILABLE = "StagingUnavailable"
    ICON_WRITE_FAILED = "IconWriteFailed"
    MANIFEST_WRITE_FAILED = "ManifestWriteFailed"
    NO_CONTENT = "NoContent"
    ARCHIVE_FAILED = "ArchiveFailed"
    REMOTE_TRANSPORT_ERROR = "RemoteTransportError"
    REMOTE_APPLICATION_ERROR = "RemoteApplicationError"
    HANDOFF_FAILED = "HandoffFailed"


@dataclass(frozen=True)
class SendOutcome:
    """Success or failure of a send, never both and never partial."""

    success: bool
    kind: ErrorKind | None = None
    message: str | None = None
    archive: Path | None = None

    @classmethod
    def ok(cls, archive: Path | None = None) -> "SendOutcome":
        return cls(success=True, archive=archive)

    @classmethod
    def failed(
        cls, error: "IconRequestError", archive: Path | None = None
    ) -> "SendOutcome":
        return cls(
            success=False, kind=error.kind, message=str(error), archive=archive
        )

    def __bool__(self) -> bool:
        return self.success
