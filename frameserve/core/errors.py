# frameserve/core/errors.py
# Error taxonomy. Routes translate these into HTTP responses; only
# ConfigError is fatal (raised before the server starts).
from __future__ import annotations

from pathlib import Path


class FrameserveError(Exception):
    """Base class for all Frameserve errors."""


class ConfigError(FrameserveError):
    """Startup configuration is unusable (bad port, unresolvable dir, broken TOML)."""


class ScanError(FrameserveError):
    """The photos directory itself could not be listed."""

    def __init__(self, directory: Path, cause: OSError) -> None:
        super().__init__(f"cannot list {directory}: {cause}")
        self.directory = directory
        self.cause = cause


class InvalidPath(FrameserveError):
    """A file name is empty or would resolve outside the base directory."""
