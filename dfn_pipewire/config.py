"""
Generator Configuration and Install State

GeneratorConfig carries every value the config generator needs, passed
in explicitly. InstallState is what a setup run records next to the
generated files so the status command can re-derive it later.

The state file is kept in the shell-compatible KEY="value" format so it
can still be sourced from a shell.
"""
import shlex
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

from .constants import (
    ATTENUATION_LIMIT_RANGE,
    CONF_DIR,
    SAMPLE_RATE,
    STATE_FILE_NAME,
    STEREO_POSITIONS,
)
from .errors import ConfigError
from .logging_config import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class GeneratorConfig:
    """Explicit inputs to the config generator."""
    plugin_path: Path
    sample_rate: int = SAMPLE_RATE
    stereo_positions: tuple[str, ...] = STEREO_POSITIONS
    attenuation_limit_db: Optional[float] = None
    post_filter_beta: Optional[float] = None
    conf_dir: Path = CONF_DIR

    @property
    def state_path(self) -> Path:
        return self.conf_dir / STATE_FILE_NAME

    def validate(self) -> None:
        """
        Check field values before anything is rendered.

        Raises:
            ConfigError: If a field is out of range
        """
        if self.sample_rate <= 0:
            raise ConfigError(f"Sample rate must be positive, got {self.sample_rate}")
        if len(self.stereo_positions) != 2:
            raise ConfigError(
                f"Stereo layout needs exactly two positions, got {list(self.stereo_positions)}")
        if self.attenuation_limit_db is not None:
            low, high = ATTENUATION_LIMIT_RANGE
            if not low <= self.attenuation_limit_db <= high:
                raise ConfigError(
                    f"Attenuation limit must be within {low:g}..{high:g} dB, "
                    f"got {self.attenuation_limit_db}")
        if self.post_filter_beta is not None and self.post_filter_beta < 0:
            raise ConfigError(f"Post filter beta must not be negative, got {self.post_filter_beta}")


@dataclass
class InstallState:
    """Facts recorded by the last setup run."""
    plugin_path: str = ""
    mono_label: str = ""
    stereo_label: str = ""
    provenance: str = ""
    source: str = ""
    sink: str = ""
    in_port: str = ""
    out_port: str = ""
    extra: dict[str, str] = field(default_factory=dict)


# Attribute name -> key in the state file
_STATE_KEYS = {
    "plugin_path": "PLUGIN_PATH",
    "mono_label": "MONO_LABEL",
    "stereo_label": "STEREO_LABEL",
    "provenance": "PROBE",
    "source": "SOURCE_TOPOLOGY",
    "sink": "SINK_TOPOLOGY",
    "in_port": "IN_PORT",
    "out_port": "OUT_PORT",
}


def save_state(state: InstallState, path: Path) -> None:
    """Write the state file, replacing any previous one."""
    lines = []
    for f in fields(state):
        if f.name == "extra":
            continue
        lines.append(f'{_STATE_KEYS[f.name]}={shlex.quote(getattr(state, f.name))}')
    for key, value in sorted(state.extra.items()):
        lines.append(f'{key}={shlex.quote(value)}')
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    _logger.debug(f"Wrote state file {path}")


def load_state(path: Path) -> Optional[InstallState]:
    """
    Read a state file written by save_state() or by the shell installer.

    Args:
        path: State file location

    Returns:
        InstallState, or None if the file does not exist

    Raises:
        ConfigError: If a line is not KEY=value
    """
    if not path.exists():
        return None

    values: dict[str, str] = {}
    for lineno, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, rest = line.partition("=")
        key = key.strip()
        if not sep or not key.isidentifier():
            raise ConfigError(f"{path}:{lineno}: expected KEY=value, got {raw!r}")
        try:
            parts = shlex.split(rest)
        except ValueError as e:
            raise ConfigError(f"{path}:{lineno}: {e}") from e
        values[key] = parts[0] if parts else ""

    state = InstallState()
    for attr, key in _STATE_KEYS.items():
        setattr(state, attr, values.pop(key, ""))
    state.extra = values
    return state
