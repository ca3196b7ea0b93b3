"""
Exception types raised by dfn_pipewire.

Each failure is raised where it happens and reported once by the CLI.
"""
from pathlib import Path


class DfnError(Exception):
    """Base class for unrecoverable setup failures."""


class ConfigError(DfnError):
    """Invalid generator configuration or unreadable state file."""


class BuildError(DfnError):
    """Plugin source could not be fetched or built."""


class InstallError(DfnError):
    """Built plugin could not be copied to a LADSPA directory."""


class ArtifactWriteError(DfnError):
    """A generated configuration file could not be written."""

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Could not write {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause
