# ui/countdown_panel.py
from __future__ import annotations

from datetime import date, datetime

import flet as ft


def _parse_time_field(value: str):
    text = (value or "").strip()
    for fmt in ("%H:%M:%S", "%H:%M", "%I:%M:%S %p", "%I:%M %p"):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


class CountdownPanel:
    def __init__(self, app_shell):
        self.app = app_shell
        self.svc = app_shell.countdown

        self.headline = ft.Text(
            "",
            key="time-left-display",
            size=32,
            weight=ft.FontWeight.W_700,
            visible=False,
        )

        self.date_tf = ft.TextField(label="Select Exam Date", read_only=True, width=200)
        self.date_picker = ft.DatePicker(
            first_date=date(2000, 1, 1),
            last_date=date(2100, 12, 31),
            on_change=self._on_date_picked,
        )
        if self.date_picker not in self.app.page.overlay:
            self.app.page.overlay.append(self.date_picker)
        self.date_btn = ft.IconButton(
            icon=ft.Icons.CALENDAR_MONTH,
            tooltip="Select Exam Date",
            on_click=lambda e: self.app.page.open(self.date_picker),
        )

        self.time_tf = ft.TextField(
            label="Select Exam Time",
            hint_text="hh:mm:ss",
            width=180,
            on_submit=self._on_time_entered,
            on_blur=self._on_time_entered,
        )

        self.enter_btn = ft.FilledButton(
            "Enter Exam Date And Time",
            key="enter-exam-time",
            on_click=self._on_confirm,
        )

        self.view = ft.Container(
            padding=16,
            content=ft.Column(
                [
                    self.headline,
                    ft.Row(
                        [ft.Row([self.date_tf, self.date_btn], spacing=6), self.time_tf],
                        alignment=ft.MainAxisAlignment.CENTER,
                        wrap=True,
                    ),
                    self.enter_btn,
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
                spacing=16,
            ),
        )

        self.svc.subscribe(self.render)

    # ---------- Rendering ----------
    def render(self):
        state = self.svc.state
        self.headline.visible = state.is_visible
        self.headline.value = self.svc.display_text() or ""
        self.date_tf.value = state.exam_datetime.strftime("%Y-%m-%d")
        if not self.time_tf.error_text:
            self.time_tf.value = state.exam_datetime.strftime("%H:%M:%S")
        if self.view.page:
            self.view.update()

    # ---------- Handlers ----------
    def _on_date_picked(self, e: ft.ControlEvent):
        picked = e.control.value
        if picked:
            self.svc.set_target_date(picked.date() if isinstance(picked, datetime) else picked)

    def _on_time_entered(self, e: ft.ControlEvent):
        parsed = _parse_time_field(self.time_tf.value)
        if parsed is None:
            self.time_tf.error_text = "Use hh:mm:ss"
            self.time_tf.update()
            return
        self.time_tf.error_text = None
        self.svc.set_target_time(parsed)

    def _on_confirm(self, e: ft.ControlEvent):
        if self.time_tf.error_text:
            self.app.toast("Fix the exam time first", ok=False)
            return
        self.svc.confirm()


__all__ = ["CountdownPanel"]
