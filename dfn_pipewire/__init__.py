"""
DeepFilter PipeWire Package

Installs the DeepFilterNet LADSPA noise-suppression plugin and wires it
into PipeWire as a denoised microphone and a denoised playback device.

Features:
- Plugin capability probe via analyseplugin (mono / stereo entry points)
- Topology selection: mono source, stereo or dual-mono sink
- Deterministic filter-chain config rendering at 48kHz
- Setup and status commands
"""

__version__ = "1.0.0"

from .constants import (
    SAMPLE_RATE,
    MONO_LABEL,
    STEREO_LABEL,
)
from .config import GeneratorConfig, InstallState, load_state, save_state
from .errors import DfnError, ConfigError, BuildError, InstallError, ArtifactWriteError
from .probe import (
    EntryPoint,
    Provenance,
    PluginDescriptor,
    probe_plugin,
    descriptor_from_text,
    fallback_descriptor,
)
from .topology import SourceTopology, SinkTopology, TopologyChoice, select_topology
from .renderer import ConfigArtifact, render_artifacts
from .writer import write_artifacts
from .generator import GenerationResult, generate

__all__ = [
    # Constants
    "SAMPLE_RATE",
    "MONO_LABEL",
    "STEREO_LABEL",
    # Classes
    "GeneratorConfig",
    "InstallState",
    "EntryPoint",
    "Provenance",
    "PluginDescriptor",
    "SourceTopology",
    "SinkTopology",
    "TopologyChoice",
    "ConfigArtifact",
    "GenerationResult",
    # Errors
    "DfnError",
    "ConfigError",
    "BuildError",
    "InstallError",
    "ArtifactWriteError",
    # Functions
    "load_state",
    "save_state",
    "probe_plugin",
    "descriptor_from_text",
    "fallback_descriptor",
    "select_topology",
    "render_artifacts",
    "write_artifacts",
    "generate",
]
