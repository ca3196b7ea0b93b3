"""
Topology Selection

Chooses how the plugin is wired into each virtual device from what the
plugin supports. Pure: the choice depends on nothing but the descriptor.
"""
from dataclasses import dataclass
from enum import Enum

from .probe import PluginDescriptor


class SourceTopology(Enum):
    MONO_SOURCE = "mono-source"
    NO_SOURCE = "no-source"


class SinkTopology(Enum):
    STEREO_SINK = "stereo-sink"
    DUAL_MONO_SINK = "dual-mono-sink"
    NO_SINK = "no-sink"


@dataclass(frozen=True)
class TopologyChoice:
    source: SourceTopology
    sink: SinkTopology

    @property
    def is_empty(self) -> bool:
        return self.source is SourceTopology.NO_SOURCE and self.sink is SinkTopology.NO_SINK


def select_source(descriptor: PluginDescriptor) -> SourceTopology:
    """Microphone side: only the native mono variant is used."""
    if descriptor.supports_mono:
        return SourceTopology.MONO_SOURCE
    return SourceTopology.NO_SOURCE


def select_sink(descriptor: PluginDescriptor) -> SinkTopology:
    """
    Playback side: native stereo if available, otherwise two mono
    instances, one per channel.
    """
    if descriptor.supports_stereo:
        return SinkTopology.STEREO_SINK
    if descriptor.supports_mono:
        return SinkTopology.DUAL_MONO_SINK
    return SinkTopology.NO_SINK


def select_topology(descriptor: PluginDescriptor) -> TopologyChoice:
    """Decide both sides independently from the same descriptor."""
    return TopologyChoice(source=select_source(descriptor), sink=select_sink(descriptor))
