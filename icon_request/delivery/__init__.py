"""
Delivery Layer.

This package routes a finished request archive to exactly one channel: the
remote request manager API or an external share target.
"""

from .router import CHANNEL_REMOTE, CHANNEL_SHARE, DeliveryRouter, select_channel
from .share import (
    DeviceInfo,
    EmlDraftTarget,
    IdentityUriTransformer,
    ShareHandoff,
    ShareTarget,
    UriTransformer,
    build_email_body,
)

__all__ = [
    "CHANNEL_REMOTE",
    "CHANNEL_SHARE",
    "DeliveryRouter",
    "DeviceInfo",
    "EmlDraftTarget",
    "IdentityUriTransformer",
    "ShareHandoff",
    "ShareTarget",
    "UriTransformer",
    "build_email_body",
    "select_channel",
]
