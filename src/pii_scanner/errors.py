"""Exceptions raised by the allowlist store."""

from __future__ import annotations


class AllowlistError(Exception):
    """Base class for allowlist persistence failures."""


class AllowlistConfigError(AllowlistError):
    """save/load called with no path and no default path configured."""

    def __init__(self) -> None:
        super().__init__("No file path specified for allowlist persistence")


class AllowlistFormatError(AllowlistError, ValueError):
    """The persisted allowlist document is malformed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid allowlist file format: {detail}")
