"""
Module Entry Point

Run with: python -m dfn_pipewire
"""
from .cli import setup_main

if __name__ == "__main__":
    setup_main()
