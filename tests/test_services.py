import subprocess
from types import SimpleNamespace

import pulsectl

from dfn_pipewire import services


class FakePulse:
    def __init__(self, name):
        self.name = name

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def sink_list(self):
        return [SimpleNamespace(index=1, name="alsa_output.pci.analog-stereo", description="Built-in"),
                SimpleNamespace(index=7, name="deepfilter.sink.capture", description="DeepFilter (Sink)")]

    def source_list(self):
        return [SimpleNamespace(index=3, name="deepfilter.source.playback", description="DeepFilter (Source)")]


def test_list_deepfilter_devices(monkeypatch):
    monkeypatch.setattr(services.pulsectl, "Pulse", FakePulse)
    devices = services.list_deepfilter_devices()
    assert [(d.kind, d.name) for d in devices] == [
        ("sink", "deepfilter.sink.capture"),
        ("source", "deepfilter.source.playback"),
    ]


def test_list_sinks_server_unavailable(monkeypatch):
    def refuse(name):
        raise pulsectl.PulseError("connection refused")

    monkeypatch.setattr(services.pulsectl, "Pulse", refuse)
    assert services.list_sinks() == []


def test_restart_pipewire_best_effort(monkeypatch):
    calls = []

    def run(cmd):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 1 if "restart" in cmd else 0, stdout="", stderr="failed")

    monkeypatch.setattr(services, "command_exists", lambda name: True)
    monkeypatch.setattr(services, "_run", run)
    assert services.restart_pipewire(settle_time=0) is False
    assert calls[0] == ["systemctl", "--user", "daemon-reload"]
    assert calls[1] == ["systemctl", "--user", "restart", "pipewire", "pipewire-pulse", "wireplumber"]


def test_restart_without_systemctl(monkeypatch):
    monkeypatch.setattr(services, "command_exists", lambda name: False)
    assert services.restart_pipewire(settle_time=0) is False
