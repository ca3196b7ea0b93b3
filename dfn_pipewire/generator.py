"""
Config Generation Pipeline

descriptor -> topology choice -> rendered artifacts -> files on disk,
plus the state file the status command reads back.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .config import GeneratorConfig, InstallState, save_state
from .constants import MSG_NOTHING_TO_GENERATE
from .logging_config import get_logger
from .probe import PluginDescriptor
from .renderer import SINK_DEVICE, SOURCE_DEVICE, ConfigArtifact, mono_ports, render_artifacts
from .topology import TopologyChoice, select_topology
from .writer import remove_stale, write_artifacts

_logger = get_logger(__name__)


@dataclass
class GenerationResult:
    descriptor: PluginDescriptor
    choice: TopologyChoice
    artifacts: List[ConfigArtifact] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    removed: List[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.written)


def plan(descriptor: PluginDescriptor, config: GeneratorConfig) -> tuple[TopologyChoice, List[ConfigArtifact]]:
    """Select and render without writing anything."""
    config.validate()
    choice = select_topology(descriptor)
    return choice, render_artifacts(descriptor, choice, config)


def generate(descriptor: PluginDescriptor, config: GeneratorConfig) -> GenerationResult:
    """
    Generate and write the PipeWire configs for a probed plugin.

    Files of a side whose topology is withheld are removed so PipeWire
    stops loading configs from an earlier run. A descriptor with no usable
    variant writes no configs; the caller decides whether that is fatal.
    The state file is written either way and records the decision.

    Args:
        descriptor: Probe result for the installed plugin
        config: Explicit generator inputs

    Returns:
        GenerationResult

    Raises:
        ConfigError: If the configuration is invalid
        ArtifactWriteError: If a file cannot be written
    """
    choice, artifacts = plan(descriptor, config)
    _logger.info(f"Topology: {choice.source.value}, {choice.sink.value} "
                 f"({descriptor.provenance.value})")

    targets = {a.path for a in artifacts}
    all_paths = [config.conf_dir / SOURCE_DEVICE.filename, config.conf_dir / SINK_DEVICE.filename]
    removed = remove_stale(p for p in all_paths if p not in targets)

    written = write_artifacts(artifacts)
    if not artifacts:
        _logger.warning(MSG_NOTHING_TO_GENERATE)

    in_port, out_port = mono_ports(descriptor) if descriptor.supports_mono else ("", "")
    save_state(InstallState(
        plugin_path=str(descriptor.path),
        mono_label=descriptor.mono_label or "",
        stereo_label=descriptor.stereo_label or "",
        provenance=descriptor.provenance.value,
        source=choice.source.value,
        sink=choice.sink.value,
        in_port=in_port,
        out_port=out_port,
    ), config.state_path)

    return GenerationResult(descriptor, choice, artifacts, written, removed)
