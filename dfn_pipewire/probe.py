"""
Plugin Capability Probe

Turns the output of the LADSPA `analyseplugin` tool into a PluginDescriptor
that says which DeepFilterNet entry points (mono, stereo) are available.

When the tool is not installed both variants are assumed. That descriptor
is marked Provenance.FALLBACK so it is never mistaken for a real probe.
"""
import re
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from .constants import (
    ANALYSE_TOOL,
    MONO_LABEL,
    MSG_TOOL_MISSING,
    STEREO_LABEL,
    SUBPROCESS_TIMEOUT_SEC,
)
from .logging_config import get_logger
from .platform_utils import command_exists

_logger = get_logger(__name__)

Runner = Callable[[Sequence[str]], subprocess.CompletedProcess]


class EntryPoint(Enum):
    """DeepFilterNet LADSPA entry points, valued by their plugin label."""
    MONO = MONO_LABEL
    STEREO = STEREO_LABEL


class Provenance(Enum):
    """Where a descriptor's capability flags came from."""
    PROBED = "probed"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class PluginPorts:
    """Audio port names of one plugin entry point, in declaration order."""
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()


@dataclass(frozen=True)
class PluginDescriptor:
    """Capabilities of an installed plugin binary."""
    path: Path
    supports_mono: bool
    supports_stereo: bool
    mono_label: Optional[str] = None
    stereo_label: Optional[str] = None
    provenance: Provenance = Provenance.PROBED
    ports: tuple[tuple[str, PluginPorts], ...] = ()

    @property
    def is_usable(self) -> bool:
        return self.supports_mono or self.supports_stereo

    def ports_for(self, label: Optional[str]) -> PluginPorts:
        """Parsed audio ports for a label, or empty if none were parsed."""
        if label is None:
            return PluginPorts()
        return dict(self.ports).get(label, PluginPorts())


_ENTRY_POINT_RE = re.compile(r"\b(" + "|".join(re.escape(e.value) for e in EntryPoint) + r")\b")
_LABEL_RE = re.compile(r'^\s*Plugin Label:\s*"?([^"\s]+)"?')
_PORT_RE = re.compile(r'"([^"]+)"\s+(input|output),\s*(audio|control)')


def parse_entry_points(text: str) -> frozenset[EntryPoint]:
    """
    Find which known entry points are named in the tool output.

    Each entry point is judged on its own, so truncated output only
    loses the variants it no longer mentions.
    """
    return frozenset(EntryPoint(m.group(1)) for m in _ENTRY_POINT_RE.finditer(text))


def parse_plugin_blocks(text: str) -> dict[str, PluginPorts]:
    """
    Parse analyseplugin output into audio ports per plugin label.

    analyseplugin prints one block per plugin in the library, each with a
    'Plugin Label:' line followed by a 'Ports:' list. Control ports are
    skipped.

    Args:
        text: Raw tool output

    Returns:
        Mapping of label -> PluginPorts
    """
    blocks: dict[str, PluginPorts] = {}
    label: Optional[str] = None
    inputs: list[str] = []
    outputs: list[str] = []

    def flush() -> None:
        if label is not None:
            blocks[label] = PluginPorts(tuple(inputs), tuple(outputs))

    for line in text.splitlines():
        m = _LABEL_RE.match(line)
        if m:
            flush()
            label = m.group(1)
            inputs, outputs = [], []
            continue
        if label is None:
            continue
        for name, direction, kind in _PORT_RE.findall(line):
            if kind != "audio":
                continue
            (inputs if direction == "input" else outputs).append(name)

    flush()
    return blocks


def descriptor_from_text(path: Path, text: str) -> PluginDescriptor:
    """Build a PROBED descriptor from analyseplugin output."""
    found = parse_entry_points(text)
    supports_mono = EntryPoint.MONO in found
    supports_stereo = EntryPoint.STEREO in found
    return PluginDescriptor(
        path=Path(path),
        supports_mono=supports_mono,
        supports_stereo=supports_stereo,
        mono_label=EntryPoint.MONO.value if supports_mono else None,
        stereo_label=EntryPoint.STEREO.value if supports_stereo else None,
        provenance=Provenance.PROBED,
        ports=tuple(sorted(parse_plugin_blocks(text).items())),
    )


def fallback_descriptor(path: Path) -> PluginDescriptor:
    """Descriptor used when the introspection tool is unavailable."""
    return PluginDescriptor(
        path=Path(path),
        supports_mono=True,
        supports_stereo=True,
        mono_label=EntryPoint.MONO.value,
        stereo_label=EntryPoint.STEREO.value,
        provenance=Provenance.FALLBACK,
    )


def _run(cmd: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(list(cmd), capture_output=True, text=True,
                          timeout=SUBPROCESS_TIMEOUT_SEC)


def run_analyseplugin(path: Path, tool: str = ANALYSE_TOOL,
                      runner: Optional[Runner] = None) -> Optional[str]:
    """
    Run the introspection tool on a plugin.

    Returns:
        The tool's stdout (possibly partial), or None if the tool is not
        available on this host
    """
    if not command_exists(tool):
        return None

    runner = runner or _run
    try:
        result = runner([tool, str(path)])
    except FileNotFoundError:
        return None
    except subprocess.TimeoutExpired as e:
        _logger.warning(f"{tool} timed out after {e.timeout}s")
        out = e.stdout or ""
        return out.decode(errors="replace") if isinstance(out, bytes) else out

    if result.returncode != 0:
        msg = (result.stderr or "").strip()
        _logger.warning(f"{tool} exited with status {result.returncode}: {msg}")
    return result.stdout or ""


def probe_plugin(path: Path, tool: str = ANALYSE_TOOL,
                 runner: Optional[Runner] = None) -> PluginDescriptor:
    """
    Probe an installed plugin for its mono and stereo entry points.

    A missing tool yields the FALLBACK descriptor. A plugin that exposes
    neither variant is not an error here; the descriptor just has both
    flags false.

    Args:
        path: Installed plugin binary
        tool: Introspection tool name
        runner: Replacement for subprocess execution

    Returns:
        PluginDescriptor
    """
    text = run_analyseplugin(path, tool=tool, runner=runner)
    if text is None:
        _logger.warning(MSG_TOOL_MISSING.format(tool))
        return fallback_descriptor(path)

    descriptor = descriptor_from_text(path, text)
    found = [label for label in (descriptor.mono_label, descriptor.stereo_label) if label]
    _logger.info(f"Detected entry points: {', '.join(found) if found else '(none)'}")
    return descriptor
