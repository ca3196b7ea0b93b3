"""
Status Report

Re-derives what the last setup run did from the files it left behind
(state file and generated configs), then adds live service and device
information.
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from . import services
from .config import InstallState, load_state
from .constants import (
    ANALYSE_TOOL,
    CONF_DIR,
    MSG_PAVUCONTROL_TIP,
    MSG_ROUTING_TIP,
    SINK_CONF_NAME,
    SOURCE_CONF_NAME,
    STATE_FILE_NAME,
    USER_SERVICES,
)
from .installer import find_installed_plugin
from .logging_config import get_logger
from .probe import PluginPorts, Runner, parse_plugin_blocks, run_analyseplugin
from .services import PulseDevice

_logger = get_logger(__name__)

_NODE_RE = re.compile(r"^\s*type\s*=\s*ladspa\b", re.MULTILINE)
_CHANNELS_RE = re.compile(r"^\s*audio\.channels\s*=\s*(\d+)", re.MULTILINE)


@dataclass
class ArtifactStatus:
    name: str
    path: Path
    exists: bool
    nodes: int = 0
    channels: Optional[int] = None


@dataclass
class StatusReport:
    state: Optional[InstallState]
    plugin_path: Optional[Path]
    artifacts: List[ArtifactStatus]
    service_states: dict[str, str] = field(default_factory=dict)
    devices: List[PulseDevice] = field(default_factory=list)
    # None when the plugin was not introspected
    plugin_ports: Optional[dict[str, PluginPorts]] = None

    @property
    def is_fallback(self) -> bool:
        return self.state is not None and self.state.provenance == "fallback"


def inspect_artifact(path: Path) -> ArtifactStatus:
    """Count processing nodes and read the channel count of a generated config."""
    if not path.is_file():
        return ArtifactStatus(path.stem, path, exists=False)
    text = path.read_text(encoding="utf-8")
    m = _CHANNELS_RE.search(text)
    return ArtifactStatus(
        name=path.stem,
        path=path,
        exists=True,
        nodes=len(_NODE_RE.findall(text)),
        channels=int(m.group(1)) if m else None,
    )


def collect_status(conf_dir: Path = CONF_DIR, live: bool = True,
                   tool: str = ANALYSE_TOOL, runner: Optional[Runner] = None) -> StatusReport:
    """
    Gather the status report.

    Args:
        conf_dir: PipeWire drop-in directory the configs were written to
        live: Also query systemd, the running audio server and the
            installed plugin
        tool: Introspection tool name
        runner: Replacement for subprocess execution of the tool

    Returns:
        StatusReport
    """
    state = load_state(conf_dir / STATE_FILE_NAME)

    plugin_path = Path(state.plugin_path) if state and state.plugin_path else None
    if plugin_path is None:
        plugin_path = find_installed_plugin()

    report = StatusReport(
        state=state,
        plugin_path=plugin_path,
        artifacts=[inspect_artifact(conf_dir / name) for name in (SOURCE_CONF_NAME, SINK_CONF_NAME)],
    )
    if live:
        report.service_states = {unit: services.service_state(unit) for unit in USER_SERVICES}
        report.devices = services.list_deepfilter_devices()
        if plugin_path is not None:
            text = run_analyseplugin(plugin_path, tool=tool, runner=runner)
            if text is not None:
                report.plugin_ports = parse_plugin_blocks(text)
    return report


def format_status(report: StatusReport) -> str:
    lines = ["== DeepFilterNet Status =="]

    if report.plugin_path is None:
        lines.append("Plugin path: <not found>")
    else:
        missing = "" if report.plugin_path.is_file() else " (missing)"
        lines.append(f"Plugin path: {report.plugin_path}{missing}")

    if report.state is None:
        lines.append("No setup state recorded - run dfn-setup first.")
    else:
        labels = [label for label in (report.state.mono_label, report.state.stereo_label) if label]
        lines.append(f"Entry points: {', '.join(labels) if labels else '(none)'}")
        probe = report.state.provenance or "unknown"
        if report.is_fallback:
            probe += " (analyseplugin missing, variants assumed)"
        lines.append(f"Probe: {probe}")
        lines.append(f"Topology: source={report.state.source or '?'} sink={report.state.sink or '?'}")
        if report.state.in_port or report.state.out_port:
            lines.append(f"Mono ports: in='{report.state.in_port}' out='{report.state.out_port}'")

    if report.plugin_ports is not None:
        lines.append("")
        lines.append("Plugin introspection:")
        if not report.plugin_ports:
            lines.append("  (no plugin labels reported)")
        for label, ports in report.plugin_ports.items():
            lines.append(f"  {label}: in={list(ports.inputs)} out={list(ports.outputs)}")

    lines.append("")
    lines.append("Generated configs:")
    for a in report.artifacts:
        if a.exists:
            lines.append(f"  {a.path}: {a.nodes} node(s), {a.channels} channel(s)")
        else:
            lines.append(f"  {a.path}: (not present)")

    if report.service_states:
        lines.append("")
        lines.append("Services:")
        for unit, state in report.service_states.items():
            lines.append(f"  {unit}: {state}")

    lines.append("")
    lines.append("PipeWire devices containing 'deepfilter':")
    if report.devices:
        for d in report.devices:
            lines.append(f"  [{d.kind}] {d.index}\t{d.name}\t{d.description}")
    else:
        lines.append("  (none)")

    lines.append("")
    lines.append(f"Tip: {MSG_ROUTING_TIP}")
    lines.append(MSG_PAVUCONTROL_TIP)
    return "\n".join(lines)
