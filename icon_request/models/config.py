"""
Pydantic model for request configuration.
Provides robust validation for all settings.
"""

from pathlib import Path
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator, model_validator

DEFAULT_EMAIL_SUBJECT = "Icon Request"


class RequestConfig(BaseModel):
    """A validated, immutable configuration for one icon request."""

    # Delivery targets
    email_recipient: str | None = None
    api_key: str | None = None
    api_host: str | None = None

    # Staging
    cache_folder: Path

    # Email content
    email_subject: str = DEFAULT_EMAIL_SUBJECT
    email_header: str | None = None
    email_footer: str | None = None
    include_device_info: bool = True

    # Manifest options
    json_manifest: bool = True

    class Config:
        """Pydantic model configuration."""

        frozen = True

    @field_validator("email_recipient", "api_key", "api_host", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Strips identifiers and treats empty strings as unset."""
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("email_subject", mode="before")
    @classmethod
    def strip_subject(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v

    @field_validator("cache_folder", mode="before")
    @classmethod
    def validate_cache_folder(cls, v: str | Path) -> Path:
        if v is None or not str(v).strip():
            raise ValueError("Cache folder cannot be empty.")
        return Path(str(v).strip()).expanduser()

    @field_validator("api_host")
    @classmethod
    def validate_api_host(cls, v: str | None) -> str | None:
        """Ensures the request manager host is an absolute http(s) URL."""
        if v is None:
            return v
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"API host must be an http(s) URL, but got: {v}")
        return v

    @model_validator(mode="after")
    def validate_remote_settings(self) -> "RequestConfig":
        """An API key is useless without a host to send the request to."""
        if self.api_key and not self.api_host:
            raise ValueError("An 'api_host' is required when 'api_key' is set.")
        return self

    @property
    def is_remote(self) -> bool:
        """True when requests go to the request manager API instead of email."""
        return bool(self.api_key)

    @property
    def has_delivery_target(self) -> bool:
        return bool(self.email_recipient) or bool(self.api_key)

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
