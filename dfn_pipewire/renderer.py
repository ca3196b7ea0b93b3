"""
PipeWire Filter-Chain Renderer

Builds the filter graph for each chosen topology and renders it as a
libpipewire-module-filter-chain drop-in file.

Topologies:
- MONO_SOURCE: one mono node, 1 channel, ports wired implicitly
- STEREO_SINK: one stereo node, 2 channels, ports wired implicitly
- DUAL_MONO_SINK: two mono nodes (dfn_l, dfn_r), 2 channels, one
  explicit link into and one out of each node per channel

Rendering is deterministic: the same inputs always give the same text.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import GeneratorConfig
from .constants import (
    CONF_HEADER,
    CONTROL_ATTENUATION_LIMIT,
    CONTROL_POST_FILTER_BETA,
    MONO_IN_PORT,
    MONO_OUT_PORT,
    MONO_POSITIONS,
    SINK_CONF_NAME,
    SINK_DESCRIPTION,
    SINK_NODE_NAME,
    SOURCE_CONF_NAME,
    SOURCE_DESCRIPTION,
    SOURCE_NODE_NAME,
)
from .probe import PluginDescriptor
from .topology import SinkTopology, SourceTopology, TopologyChoice

# Graph boundary pseudo-nodes used in links
GRAPH_INPUT = "input"
GRAPH_OUTPUT = "output"


@dataclass(frozen=True)
class GraphNode:
    name: str
    label: str
    plugin: str
    control: tuple[tuple[str, float], ...] = ()


@dataclass(frozen=True)
class GraphLink:
    output: str
    input: str


@dataclass(frozen=True)
class AudioFormat:
    rate: int
    positions: tuple[str, ...]

    @property
    def channels(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class FilterGraph:
    nodes: tuple[GraphNode, ...]
    fmt: AudioFormat
    links: tuple[GraphLink, ...] = ()

    @property
    def inputs(self) -> List[str]:
        """Node ports fed from the graph input, in channel order."""
        return [link.input for link in self.links if link.output.startswith(GRAPH_INPUT + ":")]

    @property
    def outputs(self) -> List[str]:
        """Node ports feeding the graph output, in channel order."""
        return [link.output for link in self.links if link.input.startswith(GRAPH_OUTPUT + ":")]


@dataclass(frozen=True)
class VirtualDevice:
    """The PipeWire device a filter graph is exposed as."""
    node_name: str
    description: str
    media_class: str
    filename: str

    @property
    def is_sink(self) -> bool:
        return self.media_class == "Audio/Sink"


SOURCE_DEVICE = VirtualDevice(SOURCE_NODE_NAME, SOURCE_DESCRIPTION, "Audio/Source", SOURCE_CONF_NAME)
SINK_DEVICE = VirtualDevice(SINK_NODE_NAME, SINK_DESCRIPTION, "Audio/Sink", SINK_CONF_NAME)


@dataclass(frozen=True)
class ConfigArtifact:
    """A rendered configuration document and where it goes."""
    name: str
    path: Path
    text: str = field(repr=False)


def _controls(config: GeneratorConfig) -> tuple[tuple[str, float], ...]:
    controls = []
    if config.attenuation_limit_db is not None:
        controls.append((CONTROL_ATTENUATION_LIMIT, float(config.attenuation_limit_db)))
    if config.post_filter_beta is not None:
        controls.append((CONTROL_POST_FILTER_BETA, float(config.post_filter_beta)))
    return tuple(controls)


def mono_ports(descriptor: PluginDescriptor) -> tuple[str, str]:
    """Input and output audio port of the mono entry point, with defaults."""
    ports = descriptor.ports_for(descriptor.mono_label)
    in_port = ports.inputs[0] if ports.inputs else MONO_IN_PORT
    out_port = ports.outputs[0] if ports.outputs else MONO_OUT_PORT
    return in_port, out_port


def build_source_graph(choice: TopologyChoice, descriptor: PluginDescriptor,
                       config: GeneratorConfig) -> Optional[FilterGraph]:
    """Filter graph for the microphone side, or None when withheld."""
    if choice.source is SourceTopology.NO_SOURCE:
        return None

    node = GraphNode("dfn", descriptor.mono_label, str(descriptor.path), _controls(config))
    return FilterGraph(nodes=(node,), fmt=AudioFormat(config.sample_rate, MONO_POSITIONS))


def build_sink_graph(choice: TopologyChoice, descriptor: PluginDescriptor,
                     config: GeneratorConfig) -> Optional[FilterGraph]:
    """Filter graph for the playback side, or None when withheld."""
    fmt = AudioFormat(config.sample_rate, tuple(config.stereo_positions))
    plugin = str(descriptor.path)

    if choice.sink is SinkTopology.STEREO_SINK:
        node = GraphNode("dfn", descriptor.stereo_label, plugin, _controls(config))
        return FilterGraph(nodes=(node,), fmt=fmt)

    if choice.sink is SinkTopology.DUAL_MONO_SINK:
        in_port, out_port = mono_ports(descriptor)
        nodes = []
        links = []
        for suffix, position in zip(("l", "r"), fmt.positions):
            name = f"dfn_{suffix}"
            nodes.append(GraphNode(name, descriptor.mono_label, plugin, _controls(config)))
            links.append(GraphLink(f"{GRAPH_INPUT}:{position}", f"{name}:{in_port}"))
            links.append(GraphLink(f"{name}:{out_port}", f"{GRAPH_OUTPUT}:{position}"))
        return FilterGraph(nodes=tuple(nodes), fmt=fmt, links=tuple(links))

    return None


def _quote(value: str) -> str:
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'


def _number(value: float) -> str:
    return f"{value:g}"


def _render_node(node: GraphNode) -> List[str]:
    lines = [
        "          {",
        "            type   = ladspa",
        f"            name   = {node.name}",
        f"            plugin = {_quote(node.plugin)}",
        f"            label  = {_quote(node.label)}",
    ]
    if node.control:
        lines.append("            control = {")
        for port, value in node.control:
            lines.append(f"              {_quote(port)} = {_number(value)}")
        lines.append("            }")
    lines.append("          }")
    return lines


def render_document(device: VirtualDevice, graph: FilterGraph) -> str:
    """
    Render one filter-chain module as PipeWire SPA-JSON.

    Args:
        device: Virtual device the graph is exposed as
        graph: Filter graph to embed

    Returns:
        Complete drop-in file text
    """
    positions = " ".join(graph.fmt.positions)
    lines = [
        CONF_HEADER,
        "context.modules = [",
        "  { name = libpipewire-module-filter-chain",
        "    args = {",
        f"      node.description = {_quote(device.description)}",
        f"      node.name        = {_quote(device.node_name)}",
        "",
        f"      audio.rate       = {graph.fmt.rate}",
        f"      audio.channels   = {graph.fmt.channels}",
        f"      audio.position   = [ {positions} ]",
        "",
        "      filter.graph = {",
        "        nodes = [",
    ]
    for node in graph.nodes:
        lines.extend(_render_node(node))
    lines.append("        ]")

    if graph.links:
        inputs = " ".join(_quote(p) for p in graph.inputs)
        outputs = " ".join(_quote(p) for p in graph.outputs)
        lines.append(f"        inputs  = [ {inputs} ]")
        lines.append(f"        outputs = [ {outputs} ]")
    lines.append("      }")
    lines.append("")

    # The sink is fed through the capture side; the source is read from
    # the playback side.
    capture = [f"node.name = {_quote(device.node_name + '.capture')}"]
    playback = [f"node.name = {_quote(device.node_name + '.playback')}"]
    if device.is_sink:
        capture.append(f"media.class = {_quote(device.media_class)}")
        playback.append("node.passive = true")
    else:
        capture.append("node.passive = true")
        playback.append(f"media.class = {_quote(device.media_class)}")

    lines.append(f"      capture.props  = {{ {' '.join(capture)} }}")
    lines.append(f"      playback.props = {{ {' '.join(playback)} }}")
    lines.extend([
        "    }",
        "  }",
        "]",
    ])
    return "\n".join(lines) + "\n"


def render_artifacts(descriptor: PluginDescriptor, choice: TopologyChoice,
                     config: GeneratorConfig) -> List[ConfigArtifact]:
    """
    Render every side the topology choice keeps, source first.

    Returns:
        Zero, one or two artifacts
    """
    artifacts = []
    for device, graph in (
        (SOURCE_DEVICE, build_source_graph(choice, descriptor, config)),
        (SINK_DEVICE, build_sink_graph(choice, descriptor, config)),
    ):
        if graph is None:
            continue
        artifacts.append(ConfigArtifact(
            name=device.node_name,
            path=config.conf_dir / device.filename,
            text=render_document(device, graph),
        ))
    return artifacts
