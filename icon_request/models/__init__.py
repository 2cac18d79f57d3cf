"""
Data Models Layer.

This package contains the pydantic models and value types that define the core
data structures used throughout the application: apps, configuration, remote
responses and send outcomes.
"""

from .app import AppRecord, IconRenderer, ManifestEntry, drawable_name
from .config import RequestConfig
from .outcome import ErrorKind, SendOutcome
from .response import RemoteResponse

__all__ = [
    "AppRecord",
    "ErrorKind",
    "IconRenderer",
    "ManifestEntry",
    "RemoteResponse",
    "RequestConfig",
    "SendOutcome",
    "drawable_name",
]
