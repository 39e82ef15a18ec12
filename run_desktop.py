#!/usr/bin/env python
"""Desktop app entrypoint for HabitLens."""

import flet as ft

from habitlens.desktop.app import main

if __name__ == "__main__":
    ft.app(target=main)
