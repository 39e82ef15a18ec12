"""Reusable widget components for the desktop app."""

from __future__ import annotations

from typing import Callable, Optional

import flet as ft


def build_stat_card(
    label: str,
    value: str,
    icon: Optional[str] = None,
    color: Optional[str] = None,
    subtitle: Optional[str] = None,
) -> ft.Card:
    """Build a statistic card."""

    content_column = ft.Column(
        [
            ft.Text(value, size=28, weight=ft.FontWeight.BOLD, color=color),
            ft.Text(label, size=14, color=ft.Colors.ON_SURFACE_VARIANT),
        ],
        spacing=4,
    )
    if subtitle:
        content_column.controls.append(
            ft.Text(subtitle, size=12, color=ft.Colors.ON_SURFACE_VARIANT)
        )

    card_content: ft.Control = content_column
    if icon:
        card_content = ft.Row(
            [ft.Icon(icon, size=36, color=color or ft.Colors.PRIMARY), content_column],
            spacing=16,
        )

    return ft.Card(content=ft.Container(content=card_content, padding=20), elevation=2)


def build_progress_bar(
    completed: int,
    total: int,
    label: Optional[str] = None,
    color: Optional[str] = None,
) -> ft.Column:
    """Labeled completion bar, ``completed`` out of ``total`` days."""

    ratio = completed / total if total > 0 else 0.0

    return ft.Column(
        [
            ft.Row(
                [
                    ft.Text(label or "", size=14),
                    ft.Text(
                        f"{completed} / {total} days",
                        size=14,
                        color=ft.Colors.ON_SURFACE_VARIANT,
                    ),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            ),
            ft.ProgressBar(
                value=min(ratio, 1.0),
                color=color or ft.Colors.PRIMARY,
                bgcolor=ft.Colors.SURFACE_CONTAINER_HIGHEST,
                height=8,
            ),
            ft.Text(f"{ratio * 100:.1f}%", size=12, color=color),
        ],
        spacing=4,
    )


def empty_state(message: str) -> ft.Container:
    """Simple empty-state placeholder."""

    return ft.Container(
        content=ft.Column(
            [
                ft.Icon(ft.Icons.CHECK_CIRCLE_OUTLINE, size=48, color=ft.Colors.ON_SURFACE_VARIANT),
                ft.Text(message, color=ft.Colors.ON_SURFACE_VARIANT),
            ],
            alignment=ft.MainAxisAlignment.CENTER,
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
        ),
        padding=24,
    )


def show_confirm_dialog(
    page: ft.Page,
    title: str,
    message: str,
    on_confirm: Callable[[], None],
) -> None:
    """Show a confirmation dialog."""

    def close(_e=None):
        dialog.open = False
        page.update()

    def handle_confirm(e):
        close()
        on_confirm()

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancel", on_click=close),
            ft.FilledButton("Delete", on_click=handle_confirm),
        ],
    )
    page.overlay.append(dialog)
    dialog.open = True
    page.update()
