"""
Pydantic model for the request manager API response body.
"""

from pydantic import BaseModel

STATUS_OK = "ok"
STATUS_ERROR = "error"


class RemoteResponse(BaseModel):
    """Parsed `{"status": ..., "error": ...}` reply of one upload attempt."""

    status: str
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR
