"""Exception types surfaced by the CLI as ``error: ...`` with exit code 1."""

from __future__ import annotations


class DotctlError(Exception):
    """Base class for expected, user-facing failures."""


class PayloadError(DotctlError):
    """Hook input on stdin is not a JSON object."""


class InstallError(DotctlError):
    """Configuration could not be linked into place."""


class ConfigError(DotctlError):
    """A setting has an unusable value."""
