#!/usr/bin/env python3
"""
DeepFilter PipeWire - Setup Entry Script

Builds and installs the DeepFilterNet LADSPA plugin, then wires it into
PipeWire as 'DeepFilter (Source)' and 'DeepFilter (Sink)'.

Usage:
    python run_setup.py

    Or as a module:
    python -m dfn_pipewire
"""
from dfn_pipewire.cli import setup_main

if __name__ == "__main__":
    setup_main()
