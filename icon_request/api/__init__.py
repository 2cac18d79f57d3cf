"""
Request Manager API Layer.

This package handles all communication with the remote request manager.
"""

from .uploader import RemoteUploader, UploaderSettings

__all__ = ["RemoteUploader", "UploaderSettings"]
