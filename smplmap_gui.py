#!/usr/bin/env python3
"""Sample Mapper - GUI Entry Point.

Usage: python smplmap_gui.py

Requires: flet[all]>=0.80.0
"""

import flet as ft

from gui.app import SmplmapApp


def main(page: ft.Page):
    """Main entry point for Flet application."""
    SmplmapApp(page)


def run():
    """Entry point for pipx installation."""
    ft.run(main)


if __name__ == "__main__":
    run()
