"""
Platform Utilities

Runtime platform and host tool detection.
"""
import os
import shutil
import sys
from pathlib import Path
from typing import Optional


def is_linux() -> bool:
    """Check if running on Linux."""
    return sys.platform.startswith('linux')


def command_exists(name: str) -> bool:
    """Check if an executable is available on PATH."""
    return shutil.which(name) is not None


def cargo_bin_dir() -> Path:
    """Default location rustup installs cargo into."""
    return Path.home() / ".cargo" / "bin"


def find_cargo() -> Optional[str]:
    """
    Locate the cargo executable.

    Looks on PATH first, then in ~/.cargo/bin, where rustup puts it
    without necessarily updating the current PATH.
    """
    found = shutil.which("cargo")
    if found:
        return found
    candidate = cargo_bin_dir() / "cargo"
    if candidate.is_file() and os.access(candidate, os.X_OK):
        return str(candidate)
    return None
