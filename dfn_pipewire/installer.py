"""
Plugin Build and Install

Fetches the DeepFilterNet sources, builds the LADSPA plugin with cargo and
copies the shared library into a LADSPA directory.

System-wide install (/usr/lib/ladspa) is used when passwordless sudo
works, otherwise the plugin goes to ~/.ladspa.
"""
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from .constants import (
    CARGO_PACKAGE,
    MSG_BUILD_MISSING,
    PLUGIN_FILENAME,
    REPO_DIR,
    REPO_URL,
    SYSTEM_LADSPA_DIR,
    USER_LADSPA_DIR,
)
from .errors import BuildError, InstallError
from .logging_config import get_logger
from .platform_utils import command_exists, find_cargo

_logger = get_logger(__name__)


def _run(cmd: Sequence[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
    _logger.debug(f"$ {' '.join(cmd)}")
    return subprocess.run(list(cmd), cwd=cwd, capture_output=True, text=True)


def _tail(p: subprocess.CompletedProcess, lines: int = 20) -> str:
    msg = (p.stderr or p.stdout or "").strip().splitlines()
    return "\n".join(msg[-lines:])


def sync_repo(repo_dir: Path = REPO_DIR, url: str = REPO_URL) -> Path:
    """
    Clone the plugin sources, or update an existing shallow clone.

    Update failures are tolerated (the previous checkout is still
    buildable); a failed clone is not.

    Raises:
        BuildError: If git is missing or the clone fails
    """
    if not command_exists("git"):
        raise BuildError("git not found - install git and re-run")

    if (repo_dir / ".git").is_dir():
        _logger.info(f"Updating DeepFilterNet repo in {repo_dir} ...")
        for cmd in (["git", "-C", str(repo_dir), "fetch", "--depth=1", "origin", "main"],
                    ["git", "-C", str(repo_dir), "reset", "--hard", "origin/main"]):
            p = _run(cmd)
            if p.returncode != 0:
                _logger.warning(f"'{' '.join(cmd[3:])}' failed, building existing checkout: {_tail(p, 3)}")
                break
        return repo_dir

    _logger.info(f"Cloning DeepFilterNet repo to {repo_dir} ...")
    repo_dir.parent.mkdir(parents=True, exist_ok=True)
    p = _run(["git", "clone", "--depth=1", url, str(repo_dir)])
    if p.returncode != 0:
        raise BuildError(f"git clone failed: {_tail(p)}")
    return repo_dir


def built_plugin_path(repo_dir: Path = REPO_DIR) -> Path:
    return repo_dir / "target" / "release" / PLUGIN_FILENAME


def build_plugin(repo_dir: Path = REPO_DIR) -> Path:
    """
    Build the LADSPA plugin in release mode.

    Returns:
        Path to the built shared library

    Raises:
        BuildError: If cargo is missing, the build fails, or the build
            artifact is not where cargo should have put it
    """
    cargo = find_cargo()
    if cargo is None:
        raise BuildError("cargo not found - install a Rust toolchain (https://rustup.rs) and re-run")

    _logger.info(f"Building LADSPA plugin ({CARGO_PACKAGE})...")
    p = _run([cargo, "build", "--release", "-p", CARGO_PACKAGE], cwd=repo_dir)
    if p.returncode != 0:
        raise BuildError(f"cargo build failed:\n{_tail(p)}")

    built = built_plugin_path(repo_dir)
    if not built.is_file():
        raise BuildError(MSG_BUILD_MISSING.format(built))
    _logger.info(f"Built plugin: {built}")
    return built


def has_passwordless_sudo() -> bool:
    """Check if sudo can run without prompting for a password."""
    if not command_exists("sudo"):
        return False
    return _run(["sudo", "-n", "true"]).returncode == 0


def install_plugin_system(built: Path, target_dir: Optional[Path] = None) -> Path:
    target_dir = target_dir or SYSTEM_LADSPA_DIR
    dest = target_dir / PLUGIN_FILENAME
    for cmd in (["sudo", "mkdir", "-p", str(target_dir)],
                ["sudo", "cp", "-f", str(built), str(dest)]):
        p = _run(cmd)
        if p.returncode != 0:
            raise InstallError(f"'{' '.join(cmd)}' failed: {_tail(p, 3)}")
    return dest


def install_plugin_user(built: Path, target_dir: Optional[Path] = None) -> Path:
    target_dir = target_dir or USER_LADSPA_DIR
    dest = target_dir / PLUGIN_FILENAME
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(built, dest)
    except OSError as e:
        raise InstallError(f"Could not copy plugin to {dest}: {e}") from e
    return dest


def install_plugin(built: Path) -> Path:
    """
    Install the built plugin, system-wide if possible.

    Returns:
        Installed plugin path
    """
    if has_passwordless_sudo():
        _logger.info("Installing plugin system-wide with sudo...")
        dest = install_plugin_system(built)
    else:
        _logger.info("Installing plugin for current user (no passwordless sudo)...")
        dest = install_plugin_user(built)
    _logger.info(f"Plugin installed to: {dest}")
    return dest


def plugin_candidates() -> list[Path]:
    return [SYSTEM_LADSPA_DIR / PLUGIN_FILENAME, USER_LADSPA_DIR / PLUGIN_FILENAME]


def find_installed_plugin() -> Optional[Path]:
    """First installed copy of the plugin, system-wide before per-user."""
    for candidate in plugin_candidates():
        if candidate.is_file():
            return candidate
    return None
