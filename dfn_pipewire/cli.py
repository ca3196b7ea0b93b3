"""
Command-Line Interface for DeepFilter PipeWire

Two entry points, both without options:
- dfn-setup: build, install and probe the plugin, write the PipeWire
  configs, restart PipeWire and verify
- dfn-status: report what is installed and running
"""
import argparse
import sys
import traceback
from pathlib import Path
from typing import Optional

from . import __version__
from .config import GeneratorConfig
from .constants import (
    CONF_DIR,
    MSG_PAVUCONTROL_TIP,
    MSG_ROUTING_TIP,
    SETUP_LOG_PATH,
)
from .errors import DfnError
from .generator import generate
from .installer import build_plugin, install_plugin, sync_repo
from .logging_config import enable_file_log, get_logger, set_verbose
from .platform_utils import is_linux
from .probe import probe_plugin
from .services import list_deepfilter_devices, restart_pipewire
from .status import collect_status, format_status

_logger = get_logger(__name__)


def _parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def run_setup(conf_dir: Optional[Path] = None) -> int:
    """
    Run the full setup once.

    Returns:
        Process exit status
    """
    if not is_linux():
        _logger.error("PipeWire setup is only supported on Linux.")
        return 1

    repo_dir = sync_repo()
    built = build_plugin(repo_dir)
    plugin_path = install_plugin(built)

    descriptor = probe_plugin(plugin_path)

    config = GeneratorConfig(plugin_path=plugin_path, conf_dir=conf_dir or CONF_DIR)
    config.conf_dir.mkdir(parents=True, exist_ok=True)
    result = generate(descriptor, config)
    if not result.ok:
        _logger.error("No PipeWire configs were written - setup failed")
        return 1

    print("Wrote PipeWire configs:")
    for path in result.written:
        print(f"  - {path}")

    restart_pipewire()

    print("Verifying nodes exist:")
    devices = list_deepfilter_devices()
    for d in devices:
        print(f"  [{d.kind}] {d.name}")
    if not devices:
        _logger.warning("No DeepFilter devices visible yet")

    print()
    print("=== SUCCESS ===")
    print(MSG_ROUTING_TIP)
    print(MSG_PAVUCONTROL_TIP)
    print("Run 'dfn-status' for a detailed status.")
    return 0


def setup_main():
    """Main function for the setup command."""
    _parser('dfn-setup', 'Build the DeepFilterNet LADSPA plugin and wire it into PipeWire.').parse_args()
    set_verbose(False)
    print("== DeepFilterNet Setup ==")

    try:
        enable_file_log(SETUP_LOG_PATH)
    except OSError as e:
        _logger.warning(f"Could not open log file {SETUP_LOG_PATH}: {e}")
    else:
        _logger.info(f"Log: {SETUP_LOG_PATH}")

    try:
        status = run_setup()
    except KeyboardInterrupt:
        print("\n\nSetup interrupted by user")
        status = 1
    except DfnError as e:
        _logger.error(f"Error: {e}")
        status = 1
    except Exception as e:
        _logger.error(f"Unexpected error: {e}")
        _logger.debug(traceback.format_exc())
        status = 1
    sys.exit(status)


def status_main():
    """Main function for the status command."""
    _parser('dfn-status', 'Show DeepFilterNet plugin and PipeWire device status.').parse_args()
    set_verbose(False)

    try:
        report = collect_status(CONF_DIR)
    except DfnError as e:
        _logger.error(f"Error: {e}")
        sys.exit(1)
    print(format_status(report))
    sys.exit(0)


if __name__ == "__main__":
    setup_main()
