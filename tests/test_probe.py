import subprocess
from pathlib import Path

import pytest

from dfn_pipewire import probe
from dfn_pipewire.probe import (
    EntryPoint,
    PluginPorts,
    Provenance,
    descriptor_from_text,
    fallback_descriptor,
    parse_entry_points,
    parse_plugin_blocks,
    probe_plugin,
)

from conftest import ANALYSE_BOTH, ANALYSE_MONO, PLUGIN


def _runner(stdout, returncode=0):
    calls = []

    def run(cmd):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")

    run.calls = calls
    return run


@pytest.fixture
def tool_present(monkeypatch):
    monkeypatch.setattr(probe, "command_exists", lambda name: True)


@pytest.fixture
def tool_missing(monkeypatch):
    monkeypatch.setattr(probe, "command_exists", lambda name: False)


def test_parse_entry_points_both():
    assert parse_entry_points(ANALYSE_BOTH) == {EntryPoint.MONO, EntryPoint.STEREO}


def test_parse_entry_points_ignores_library_name():
    assert parse_entry_points("/usr/lib/ladspa/libdeep_filter_ladspa.so") == frozenset()


def test_parse_entry_points_truncated_output():
    truncated = ANALYSE_BOTH[:ANALYSE_BOTH.index("deep_filter_stereo") - 3]
    assert parse_entry_points(truncated) == {EntryPoint.MONO}


def test_parse_entry_points_matches_whole_labels_only():
    text = "Plugin Label: \"deep_filter_mono_v2\"\nPlugin Label: \"xdeep_filter_stereo\"\n"
    assert parse_entry_points(text) == frozenset()
    assert parse_entry_points('Plugin Label: "deep_filter_stereo"') == {EntryPoint.STEREO}


def test_parse_plugin_blocks_audio_ports_only():
    blocks = parse_plugin_blocks(ANALYSE_BOTH)
    assert blocks["deep_filter_mono"] == PluginPorts(("Audio In",), ("Audio Out",))
    assert blocks["deep_filter_stereo"].inputs == ("Audio In L", "Audio In R")
    assert blocks["deep_filter_stereo"].outputs == ("Audio Out L", "Audio Out R")


def test_descriptor_mono_only():
    d = descriptor_from_text(PLUGIN, ANALYSE_MONO)
    assert d.supports_mono and not d.supports_stereo
    assert d.mono_label == "deep_filter_mono"
    assert d.stereo_label is None
    assert d.provenance is Provenance.PROBED


def test_descriptor_nothing_found_is_not_an_error():
    d = descriptor_from_text(PLUGIN, "analyseplugin: cannot load plugin\n")
    assert not d.supports_mono and not d.supports_stereo
    assert not d.is_usable
    assert d.mono_label is None and d.stereo_label is None


def test_probe_runs_tool_on_plugin(tool_present):
    run = _runner(ANALYSE_BOTH)
    d = probe_plugin(PLUGIN, runner=run)
    assert run.calls == [["analyseplugin", str(PLUGIN)]]
    assert d.supports_mono and d.supports_stereo
    assert d.provenance is Provenance.PROBED


def test_probe_nonzero_exit_keeps_partial_output(tool_present):
    d = probe_plugin(PLUGIN, runner=_runner(ANALYSE_MONO, returncode=1))
    assert d.supports_mono and not d.supports_stereo


def test_probe_timeout_treated_as_partial_output(tool_present):
    def run(cmd):
        raise subprocess.TimeoutExpired(cmd, 30, output=b"Plugin Label: \"deep_filter_stereo\"\n")

    d = probe_plugin(PLUGIN, runner=run)
    assert d.supports_stereo and not d.supports_mono


def test_probe_fallback_when_tool_missing(tool_missing):
    def run(cmd):
        raise AssertionError("tool must not be run")

    d = probe_plugin(PLUGIN, runner=run)
    assert d.provenance is Provenance.FALLBACK
    assert d.supports_mono and d.supports_stereo
    assert d.mono_label == "deep_filter_mono"
    assert d.stereo_label == "deep_filter_stereo"


def test_fallback_distinguishable_from_real_probe():
    probed = descriptor_from_text(PLUGIN, ANALYSE_BOTH)
    fallback = fallback_descriptor(PLUGIN)
    assert (probed.supports_mono, probed.supports_stereo) == (fallback.supports_mono, fallback.supports_stereo)
    assert probed.mono_label == fallback.mono_label
    assert probed.stereo_label == fallback.stereo_label
    assert probed != fallback


def test_descriptor_path_is_normalised_to_path():
    d = descriptor_from_text("/tmp/x.so", "")
    assert d.path == Path("/tmp/x.so")


def test_descriptors_with_different_ports_are_not_equal():
    a = descriptor_from_text(PLUGIN, ANALYSE_MONO)
    b = descriptor_from_text(PLUGIN, ANALYSE_MONO.replace('"Audio In"', '"In"'))
    assert (a.supports_mono, a.mono_label) == (b.supports_mono, b.mono_label)
    assert a != b
    assert len({a, b}) == 2
    assert b.ports_for("deep_filter_mono").inputs == ("In",)
