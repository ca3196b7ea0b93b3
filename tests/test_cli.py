import pytest

from dfn_pipewire import cli
from dfn_pipewire.errors import BuildError

from conftest import PLUGIN, make_descriptor


@pytest.fixture
def host(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "enable_file_log", lambda path: None)
    monkeypatch.setattr(cli, "is_linux", lambda: True)
    monkeypatch.setattr(cli, "sync_repo", lambda: tmp_path / "repo")
    monkeypatch.setattr(cli, "build_plugin", lambda repo: repo / "libdeep_filter_ladspa.so")
    monkeypatch.setattr(cli, "install_plugin", lambda built: PLUGIN)
    monkeypatch.setattr(cli, "restart_pipewire", lambda: True)
    monkeypatch.setattr(cli, "list_deepfilter_devices", lambda: [])
    monkeypatch.setattr(cli, "CONF_DIR", tmp_path / "pipewire.conf.d")
    monkeypatch.setattr("sys.argv", ["dfn-setup"])
    return tmp_path


def test_setup_success(host, monkeypatch):
    monkeypatch.setattr(cli, "probe_plugin", lambda path: make_descriptor(True, True))
    with pytest.raises(SystemExit) as exc:
        cli.setup_main()
    assert exc.value.code == 0
    conf_dir = host / "pipewire.conf.d"
    assert (conf_dir / "deepfilter-source.conf").exists()
    assert (conf_dir / "deepfilter-sink.conf").exists()


def test_setup_fails_when_nothing_generated(host, monkeypatch):
    monkeypatch.setattr(cli, "probe_plugin", lambda path: make_descriptor(False, False))
    with pytest.raises(SystemExit) as exc:
        cli.setup_main()
    assert exc.value.code == 1


def test_setup_fails_on_missing_build_artifact(host, monkeypatch):
    def fail(repo):
        raise BuildError("Build finished but plugin not found")

    monkeypatch.setattr(cli, "build_plugin", fail)
    with pytest.raises(SystemExit) as exc:
        cli.setup_main()
    assert exc.value.code == 1


def test_status_exits_zero(host, monkeypatch, capsys):
    monkeypatch.setattr(cli, "probe_plugin", lambda path: make_descriptor(True, False))
    with pytest.raises(SystemExit):
        cli.setup_main()
    capsys.readouterr()

    monkeypatch.setattr("dfn_pipewire.services.service_state", lambda unit: "active")
    monkeypatch.setattr("dfn_pipewire.services.list_deepfilter_devices", lambda: [])
    monkeypatch.setattr("dfn_pipewire.probe.command_exists", lambda name: False)
    monkeypatch.setattr("sys.argv", ["dfn-status"])
    with pytest.raises(SystemExit) as exc:
        cli.status_main()
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "== DeepFilterNet Status ==" in out
    assert "sink=dual-mono-sink" in out
    assert "2 node(s), 2 channel(s)" in out
