"""
Media Layer.

This package is responsible for turning app icon resources into images.
"""

from .icons import FileIconRenderer

__all__ = ["FileIconRenderer"]
