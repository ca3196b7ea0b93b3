#!/usr/bin/env python3
"""
DeepFilter PipeWire - Status Entry Script

Usage:
    python run_status.py
"""
from dfn_pipewire.cli import status_main

if __name__ == "__main__":
    status_main()
