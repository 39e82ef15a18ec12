"""Habits view: list, completion toggles, selection and period charts."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

import flet as ft

from ...devtools import dev_log
from ...domain.habits import Habit, InvalidHabitName
from ...domain.periods import TimePeriod
from ...domain.repositories.habit import HabitStoreError
from ...domain.selection import AllHabits, is_selected
from ..charts import completion_bars_png, pie_chart_png, swap_png
from ..components import build_progress_bar, build_stat_card, empty_state, show_confirm_dialog
from ..constants import HABIT_COLOR_OPTIONS, PERIOD_LABELS

if TYPE_CHECKING:
    from ..context import AppContext


def _show_snack(page: ft.Page, message: str) -> None:
    page.snack_bar = ft.SnackBar(content=ft.Text(message))
    page.snack_bar.open = True
    page.update()


def _safe_update(control: ft.Control | None) -> None:
    if control is not None and getattr(control, "page", None):
        control.update()


def build_habits_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the single-page habits view."""

    tracker = ctx.tracker
    habit_list_ref = ft.Ref[ft.Column]()
    chips_ref = ft.Ref[ft.Row]()
    label_ref = ft.Ref[ft.Text]()
    stats_ref = ft.Ref[ft.Row]()
    pie_ref = ft.Ref[ft.Image]()
    bars_ref = ft.Ref[ft.Image]()

    name_field = ft.TextField(label="New habit", expand=True, on_submit=lambda e: _add(e))
    color_field = ft.Dropdown(
        label="Color",
        width=140,
        value=HABIT_COLOR_OPTIONS[0][0],
        options=[ft.dropdown.Option(value, text) for value, text in HABIT_COLOR_OPTIONS],
    )
    period_field = ft.Dropdown(
        label="Period",
        width=140,
        value=tracker.state.period.value,
        options=[ft.dropdown.Option(p.value, label) for p, label in PERIOD_LABELS.items()],
        on_change=lambda e: _change_period(e.control.value),
    )

    def refresh() -> None:
        state = tracker.state
        records = tracker.chart_records()
        summary = tracker.pie_summary()

        label_ref.current.value = tracker.period_label()

        rows: list[ft.Control] = []
        for record in records:
            habit = record.habit
            rows.append(
                ft.Card(
                    content=ft.Container(
                        content=ft.Row(
                            [
                                ft.Checkbox(
                                    value=habit.is_completed_on(state.reference, ctx.settings),
                                    on_change=lambda _e, hid=habit.id: _toggle(hid),
                                    tooltip="Done on this day",
                                ),
                                ft.Container(width=12, height=12, bgcolor=habit.color, border_radius=6),
                                ft.Container(
                                    content=build_progress_bar(
                                        record.completed_days,
                                        record.total_days,
                                        label=habit.name,
                                        color=habit.color,
                                    ),
                                    expand=True,
                                ),
                                ft.IconButton(
                                    icon=ft.Icons.FILTER_CENTER_FOCUS,
                                    tooltip="Chart only this habit",
                                    on_click=lambda _e, hid=habit.id: _select_only(hid),
                                ),
                                ft.IconButton(
                                    icon=ft.Icons.EDIT,
                                    tooltip="Edit habit",
                                    on_click=lambda _e, h=habit: _open_edit_dialog(h),
                                ),
                                ft.IconButton(
                                    icon=ft.Icons.DELETE_OUTLINE,
                                    tooltip="Delete habit",
                                    on_click=lambda _e, h=habit: _confirm_delete(h),
                                ),
                            ],
                            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                        ),
                        padding=12,
                    )
                )
            )
        if not rows:
            rows.append(empty_state("Create your first habit to start tracking"))
        habit_list_ref.current.controls = rows

        chips: list[ft.Control] = [
            ft.Chip(
                label=ft.Text("All"),
                selected=isinstance(state.selection, AllHabits),
                on_select=lambda _e: _select_all(),
            )
        ]
        for habit in state.habits:
            chips.append(
                ft.Chip(
                    label=ft.Text(habit.name),
                    selected=is_selected(state.selection, habit.id),
                    on_select=lambda _e, hid=habit.id: _toggle_selection(hid),
                )
            )
        chips_ref.current.controls = chips

        stats_ref.current.controls = [
            build_stat_card(
                "Completed",
                f"{summary.completed_percentage:.1f}%",
                icon=ft.Icons.CHECK_CIRCLE,
                color=ft.Colors.GREEN,
                subtitle=f"{summary.completed_days} of {summary.total_days} possible",
            ),
            build_stat_card(
                "Done today",
                f"{tracker.today_completion_rate() * 100:.0f}%",
                icon=ft.Icons.TODAY,
            ),
        ]

        pie_ref.current.src = swap_png(
            pie_ref.current.src, pie_chart_png(summary, title=tracker.period_label())
        )
        bars_ref.current.src = swap_png(bars_ref.current.src, completion_bars_png(records))
        page.update()

    def _add(_e=None) -> None:
        try:
            habit = tracker.add_habit(name_field.value or "", color_field.value)
        except InvalidHabitName:
            name_field.error_text = "Enter a habit name"
            _safe_update(name_field)
            return
        except HabitStoreError as exc:
            dev_log(ctx.config, "Habit create failed", exc=exc)
            _show_snack(page, f"Could not save habit: {exc}")
            return
        name_field.value = ""
        name_field.error_text = None
        refresh()
        _show_snack(page, f"Added {habit.name}")

    def _toggle(habit_id: str) -> None:
        if not tracker.toggle_completion(habit_id, tracker.state.reference):
            if tracker.last_error:
                _show_snack(page, f"Could not save: {tracker.last_error}")
        refresh()

    def _open_edit_dialog(habit: Habit) -> None:
        edit_name = ft.TextField(label="Name", value=habit.name, autofocus=True)
        options = [ft.dropdown.Option(value, text) for value, text in HABIT_COLOR_OPTIONS]
        if habit.color not in {value for value, _text in HABIT_COLOR_OPTIONS}:
            options.insert(0, ft.dropdown.Option(habit.color, habit.color))
        edit_color = ft.Dropdown(label="Color", value=habit.color, options=options)

        def close(_e=None) -> None:
            dialog.open = False
            page.update()

        def save(_e=None) -> None:
            try:
                tracker.update_habit(habit.id, edit_name.value or "", edit_color.value)
            except InvalidHabitName:
                edit_name.error_text = "Enter a habit name"
                _safe_update(edit_name)
                return
            except HabitStoreError as exc:
                dev_log(ctx.config, "Habit update failed", exc=exc, context={"habit_id": habit.id})
                _show_snack(page, f"Could not save habit: {exc}")
                return
            close()
            refresh()

        dialog = ft.AlertDialog(
            modal=True,
            title=ft.Text("Edit habit"),
            content=ft.Column([edit_name, edit_color], tight=True, width=320),
            actions=[
                ft.TextButton("Cancel", on_click=close),
                ft.FilledButton("Save", on_click=save),
            ],
        )
        page.overlay.append(dialog)
        dialog.open = True
        page.update()

    def _confirm_delete(habit: Habit) -> None:
        def _delete() -> None:
            try:
                tracker.remove_habit(habit.id)
            except HabitStoreError as exc:
                dev_log(ctx.config, "Habit delete failed", exc=exc, context={"habit_id": habit.id})
                _show_snack(page, f"Could not delete habit: {exc}")
                return
            refresh()

        show_confirm_dialog(page, "Delete habit", f"Delete '{habit.name}' and its history?", _delete)

    def _select_all() -> None:
        tracker.select_all()
        refresh()

    def _toggle_selection(habit_id: str) -> None:
        tracker.toggle_selection(habit_id)
        refresh()

    def _select_only(habit_id: str) -> None:
        tracker.select_only(habit_id)
        refresh()

    def _change_period(value: str | None) -> None:
        if value:
            tracker.set_period(TimePeriod(value))
            refresh()

    def _shift(delta: int) -> None:
        if delta > 0:
            tracker.next_period()
        elif delta < 0:
            tracker.previous_period()
        else:
            tracker.reset_reference()
        refresh()

    def _jump(picked: Optional[date]) -> None:
        if picked is None:
            return
        tracker.set_reference(picked.date() if isinstance(picked, datetime) else picked)
        refresh()

    date_picker = ft.DatePicker(on_change=lambda _e: _jump(date_picker.value))
    page.overlay.append(date_picker)

    def _open_date_picker(_e=None) -> None:
        date_picker.value = datetime.combine(tracker.state.reference, datetime.min.time())
        date_picker.open = True
        page.update()

    navigation = ft.Row(
        [
            ft.IconButton(icon=ft.Icons.CHEVRON_LEFT, tooltip="Previous", on_click=lambda _e: _shift(-1)),
            ft.Text(ref=label_ref, size=18, weight=ft.FontWeight.BOLD),
            ft.IconButton(icon=ft.Icons.CHEVRON_RIGHT, tooltip="Next", on_click=lambda _e: _shift(1)),
            ft.TextButton("Today", on_click=lambda _e: _shift(0)),
            ft.IconButton(icon=ft.Icons.CALENDAR_MONTH, tooltip="Jump to date", on_click=_open_date_picker),
            period_field,
        ],
        vertical_alignment=ft.CrossAxisAlignment.CENTER,
    )

    left = ft.Column(
        [
            ft.Row([name_field, color_field, ft.FilledButton("Add", on_click=_add)]),
            ft.Column(ref=habit_list_ref, spacing=8, scroll=ft.ScrollMode.AUTO, expand=True),
        ],
        expand=1,
    )
    right = ft.Column(
        [
            ft.Row(ref=chips_ref, wrap=True, spacing=6),
            ft.Row(ref=stats_ref, spacing=12),
            ft.Image(ref=pie_ref, width=420, fit=ft.ImageFit.CONTAIN),
            ft.Image(ref=bars_ref, width=420, fit=ft.ImageFit.CONTAIN),
        ],
        scroll=ft.ScrollMode.AUTO,
        expand=1,
    )

    view = ft.View(
        route="/habits",
        controls=[
            ft.Container(
                content=ft.Column([navigation, ft.Row([left, right], expand=True)], expand=True),
                padding=16,
                expand=True,
            )
        ],
        padding=0,
    )
    refresh()
    return view
