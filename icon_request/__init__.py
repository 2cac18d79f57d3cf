"""
icon-request: packages icon requests into an archive and delivers them.
"""

__version__ = "1.0.0"
