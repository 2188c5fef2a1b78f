"""
Exceptions raised by site_auditor.

Only DirectoryNotFound (and ConfigError, before a scan starts) ever escape a
scan; everything else is turned into a Finding by the scanner.
"""

from __future__ import annotations


class AuditError(Exception):
    """Base class for site_auditor errors."""


class DirectoryNotFound(AuditError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Directory '{path}' does not exist")
        self.path = path


class ReadFailure(AuditError):
    """A file could not be read or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not read '{path}': {reason}")
        self.path = path
        self.reason = reason


class ConfigError(AuditError):
    """The configuration file is missing or malformed."""
