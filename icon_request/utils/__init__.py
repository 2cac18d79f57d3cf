"""
Shared helpers: human-readable formatting and structured logging.
"""
