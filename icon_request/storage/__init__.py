"""
Storage Layer.

This package handles configuration files and the selection files that list the
apps of a request.
"""

from .config_manager import ConfigManager
from .selection import load_selection

__all__ = ["ConfigManager", "load_selection"]
