"""
DeepFilter PipeWire Constants

Central location for all configuration constants used across the package.
"""
from pathlib import Path

# Audio format contract
SAMPLE_RATE = 48000
MONO_POSITIONS = ("MONO",)
STEREO_POSITIONS = ("FL", "FR")

# LADSPA entry points exposed by the DeepFilterNet plugin
MONO_LABEL = "deep_filter_mono"
STEREO_LABEL = "deep_filter_stereo"

# Audio port names used when introspection yields none
MONO_IN_PORT = "Audio In"
MONO_OUT_PORT = "Audio Out"

# Control port names
CONTROL_ATTENUATION_LIMIT = "Attenuation Limit (dB)"
CONTROL_POST_FILTER_BETA = "Post Filter Beta"
ATTENUATION_LIMIT_RANGE = (0.0, 100.0)

# Plugin build and install locations
PLUGIN_FILENAME = "libdeep_filter_ladspa.so"
SYSTEM_LADSPA_DIR = Path("/usr/lib/ladspa")
USER_LADSPA_DIR = Path.home() / ".ladspa"
REPO_URL = "https://github.com/Rikorose/DeepFilterNet"
REPO_DIR = Path.home() / ".cache" / "DeepFilterNet"
CARGO_PACKAGE = "deep-filter-ladspa"
ANALYSE_TOOL = "analyseplugin"

# PipeWire drop-in configuration
CONF_DIR = Path.home() / ".config" / "pipewire" / "pipewire.conf.d"
SOURCE_CONF_NAME = "deepfilter-source.conf"
SINK_CONF_NAME = "deepfilter-sink.conf"
STATE_FILE_NAME = ".deepfilter.env"
NODE_PREFIX = "deepfilter."
SOURCE_NODE_NAME = "deepfilter.source"
SINK_NODE_NAME = "deepfilter.sink"
SOURCE_DESCRIPTION = "DeepFilter (Source)"
SINK_DESCRIPTION = "DeepFilter (Sink)"
CONF_HEADER = "# Auto-generated by dfn-setup"

# Service management
USER_SERVICES = ("pipewire", "pipewire-pulse", "wireplumber")
RESTART_SETTLE_TIME_SEC = 2.0
SUBPROCESS_TIMEOUT_SEC = 30

# Logging
SETUP_LOG_PATH = Path("/tmp/dfn-setup.log")

# Shared Messages
MSG_TOOL_MISSING = "'{}' not found - assuming both mono and stereo variants (unverified)"
MSG_BUILD_MISSING = "Build finished but plugin not found at {}"
MSG_NOTHING_TO_GENERATE = "Plugin exposes neither mono nor stereo variant - no configs generated"
MSG_ROUTING_TIP = ("Route app OUTPUT to 'DeepFilter (Sink)' and select "
                   "'DeepFilter (Source)' as your microphone.")
MSG_PAVUCONTROL_TIP = "If the devices are missing, open 'pavucontrol' and check the Playback/Input tabs."
