"""Constants for Sigil."""

__all__ = [
    "LOGGER_NAME",
    "REDACTED",
    "TOKEN_TYPE",
]

LOGGER_NAME = "sigil"
"""Name of the logger used for all Sigil log messages."""

REDACTED = "<redacted>"
"""Replacement for the signature of tokens written to logs."""

TOKEN_TYPE = "JWT"
"""Value of the ``typ`` header in new tokens."""
