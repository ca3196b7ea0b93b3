from pathlib import Path

import pytest

from dfn_pipewire.config import GeneratorConfig
from dfn_pipewire.probe import PluginDescriptor, Provenance

PLUGIN = Path("/usr/lib/ladspa/libdeep_filter_ladspa.so")

ANALYSE_BOTH = """
Plugin Name: "DeepFilter Mono"
Plugin Label: "deep_filter_mono"
Plugin Unique ID: 7843795
Maker: "Hendrik Schroeter"
Copyright: "MIT/Apache-2.0"
Must Run Real-Time: No
Has activate() Function: Yes
Has deactivate() Function: No
Has run_adding() Function: No
Environment: Normal
Ports:\t"Audio In" input, audio
\t"Audio Out" output, audio
\t"Attenuation Limit (dB)" input, control, 0 to 100, default 100

Plugin Name: "DeepFilter Stereo"
Plugin Label: "deep_filter_stereo"
Plugin Unique ID: 7843796
Maker: "Hendrik Schroeter"
Copyright: "MIT/Apache-2.0"
Must Run Real-Time: No
Has activate() Function: Yes
Has deactivate() Function: No
Has run_adding() Function: No
Environment: Normal
Ports:\t"Audio In L" input, audio
\t"Audio In R" input, audio
\t"Audio Out L" output, audio
\t"Audio Out R" output, audio
\t"Attenuation Limit (dB)" input, control, 0 to 100, default 100
"""

ANALYSE_MONO = ANALYSE_BOTH.split("\n\n")[0] + "\n"


def make_descriptor(mono: bool, stereo: bool,
                    provenance: Provenance = Provenance.PROBED) -> PluginDescriptor:
    return PluginDescriptor(
        path=PLUGIN,
        supports_mono=mono,
        supports_stereo=stereo,
        mono_label="deep_filter_mono" if mono else None,
        stereo_label="deep_filter_stereo" if stereo else None,
        provenance=provenance,
    )


@pytest.fixture
def config(tmp_path):
    return GeneratorConfig(plugin_path=PLUGIN, conf_dir=tmp_path)
