"""
PipeWire Service Control

Restarts the user's PipeWire services so new drop-in configs load, and
queries the running server through its PulseAudio interface (pulsectl).
"""
import subprocess
import time
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import pulsectl

from .constants import NODE_PREFIX, RESTART_SETTLE_TIME_SEC, USER_SERVICES
from .logging_config import get_logger
from .platform_utils import command_exists

_logger = get_logger(__name__)

PULSE_CLIENT_NAME = "dfn-pipewire"


@dataclass
class PulseDevice:
    """Short listing row for a PulseAudio/PipeWire sink or source."""
    index: int
    name: str
    description: str
    kind: str  # "sink" or "source"


def _run(cmd: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(list(cmd), capture_output=True, text=True)


def restart_pipewire(services: Iterable[str] = USER_SERVICES,
                     settle_time: float = RESTART_SETTLE_TIME_SEC) -> bool:
    """
    Reload systemd user units and restart the PipeWire services.

    Best effort: failures are logged, not raised.

    Returns:
        True if every command succeeded
    """
    if not command_exists("systemctl"):
        _logger.warning("systemctl not found - restart PipeWire manually to load the new configs")
        return False

    _logger.info("Restarting PipeWire for current user...")
    ok = True
    for cmd in (["systemctl", "--user", "daemon-reload"],
                ["systemctl", "--user", "restart", *services]):
        p = _run(cmd)
        if p.returncode != 0:
            _logger.warning(f"'{' '.join(cmd)}' failed: {(p.stderr or p.stdout).strip()}")
            ok = False
    time.sleep(settle_time)
    return ok


def service_state(unit: str) -> str:
    """Active state of a systemd user unit, e.g. 'active' or 'inactive'."""
    if not command_exists("systemctl"):
        return "unknown"
    p = _run(["systemctl", "--user", "is-active", unit])
    return (p.stdout or "").strip() or "unknown"


def _list_devices(kind: str) -> List[PulseDevice]:
    try:
        with pulsectl.Pulse(PULSE_CLIENT_NAME) as pulse:
            items = pulse.sink_list() if kind == "sink" else pulse.source_list()
            return [PulseDevice(index=item.index, name=item.name,
                                description=item.description, kind=kind)
                    for item in items]
    except pulsectl.PulseError as e:
        _logger.warning(f"Failed to list PulseAudio {kind}s: {e}")
        return []


def list_sinks() -> List[PulseDevice]:
    return _list_devices("sink")


def list_sources() -> List[PulseDevice]:
    return _list_devices("source")


def list_deepfilter_devices() -> List[PulseDevice]:
    """Sinks and sources created by the generated filter-chain configs."""
    return [d for d in list_sinks() + list_sources() if d.name.startswith(NODE_PREFIX)]
