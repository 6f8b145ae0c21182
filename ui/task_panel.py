# ui/task_panel.py
from __future__ import annotations

from dataclasses import dataclass

import flet as ft

from core.settings import UI
from models.study_task import StudyTask
from services.study_tasks import InvalidGoalTime
from utils.time_format import format_time, parse_goal_time


@dataclass
class _Row:
    """Controls of one rendered task, kept so ticks can patch them in place."""

    name: ft.TextField
    checkbox: ft.Checkbox
    time_spent: ft.TextField
    goal: ft.TextField
    start_btn: ft.TextButton
    container: ft.Container


class TaskPanel:
    def __init__(self, app_shell):
        self.app = app_shell
        self.svc = app_shell.tasks
        self._rows: dict[int, _Row] = {}
        self._rendered_ids: tuple[int, ...] = ()

        self.totals = ft.Text("", key="total-time", size=20, weight=ft.FontWeight.W_600)
        self.add_btn = ft.TextButton(
            "Add Study Task",
            key="add-study-task",
            icon=ft.Icons.ADD,
            on_click=lambda e: self.svc.add_task(),
        )
        self._list_holder = ft.Column(spacing=12)

        self.view = ft.Container(
            width=UI.list_max_width,
            padding=12,
            content=ft.Column(
                [
                    self.add_btn,
                    ft.Container(self.totals, alignment=ft.alignment.center, padding=ft.padding.only(bottom=20)),
                    self._list_holder,
                ],
                spacing=12,
            ),
        )

        self.svc.subscribe("after_update", self.render)
        self.svc.subscribe("after_tick", self.render_ticks)

    # ---------- Rendering ----------
    def render(self):
        tasks = self.svc.tasks
        ids = tuple(t.id for t in tasks)
        if ids != self._rendered_ids:
            self._rows = {t.id: self._build_row(t) for t in tasks}
            self._list_holder.controls = [self._rows[t.id].container for t in tasks]
            self._rendered_ids = ids
        else:
            for task in tasks:
                self._sync_row(self._rows[task.id], task, full=True)
        self._render_totals()
        self._flush()

    def render_ticks(self):
        for task in self.svc.tasks:
            row = self._rows.get(task.id)
            if row is not None:
                self._sync_row(row, task, full=False)
        self._render_totals()
        self._flush()

    def _flush(self):
        if self.view.page:
            self.view.update()

    def _render_totals(self):
        self.totals.value = (
            f"Total Time Spent: {format_time(self.svc.total_time_spent())}"
            f" -- Total Goal Time: {format_time(self.svc.total_goal_time())}"
        )

    def _sync_row(self, row: _Row, task: StudyTask, *, full: bool):
        row.time_spent.value = format_time(task.time)
        goal_seconds = parse_goal_time(task.goal_time)
        reached = bool(goal_seconds) and task.time >= goal_seconds
        row.time_spent.color = UI.theme.goal_reached if reached else None
        row.start_btn.text = "Pause" if task.is_running else "Start"
        row.start_btn.style = ft.ButtonStyle(color=UI.theme.running if task.is_running else None)
        if full:
            row.checkbox.value = task.checked
            if not row.goal.error_text:
                row.goal.value = task.goal_time or "00:00:00"

    def _build_row(self, task: StudyTask) -> _Row:
        tid = task.id
        name = ft.TextField(
            value=task.text,
            expand=True,
            border=ft.InputBorder.UNDERLINE,
            on_change=lambda e, tid=tid: self.svc.rename_task(tid, e.control.value),
        )
        checkbox = ft.Checkbox(
            value=task.checked,
            on_change=lambda e, tid=tid: self.svc.toggle_checked(tid),
            semantics_label=f"Mark {task.text} as done",
        )
        delete_btn = ft.IconButton(
            icon=ft.Icons.DELETE_OUTLINE,
            tooltip="Delete",
            on_click=lambda e, tid=tid: self.svc.delete_task(tid),
        )
        time_spent = ft.TextField(label="Time Spent", read_only=True, width=160, dense=True)
        goal = ft.TextField(
            label="Goal Time",
            width=160,
            dense=True,
            on_submit=lambda e, tid=tid: self._on_goal_entered(tid, e.control),
            on_blur=lambda e, tid=tid: self._on_goal_entered(tid, e.control),
        )
        start_btn = ft.TextButton(
            "Start",
            key=f"start-pause-{tid}",
            on_click=lambda e, tid=tid: self.svc.start_or_stop(tid),
        )
        reset_btn = ft.TextButton(
            "Reset",
            key=f"reset-{tid}",
            on_click=lambda e, tid=tid: self.svc.reset_task(tid),
        )

        container = ft.Container(
            content=ft.Column(
                [
                    ft.Row([name, checkbox, delete_btn], vertical_alignment=ft.CrossAxisAlignment.CENTER),
                    ft.Row([time_spent, goal], spacing=16, wrap=True),
                    ft.Row([start_btn, reset_btn], alignment=ft.MainAxisAlignment.START),
                ],
                spacing=8,
            ),
            padding=ft.padding.symmetric(horizontal=12, vertical=10),
            border_radius=10,
            border=ft.border.all(1, UI.theme.outline),
        )
        row = _Row(name, checkbox, time_spent, goal, start_btn, container)
        self._sync_row(row, task, full=True)
        return row

    # ---------- Handlers ----------
    def _on_goal_entered(self, task_id: int, field: ft.TextField):
        value = field.value or ""
        if value.strip() == "00:00:00":
            value = ""
        field.error_text = None
        try:
            self.svc.set_goal_time(task_id, value)
        except InvalidGoalTime:
            field.error_text = "Use HH:MM:SS"
            field.update()
            self.app.toast(f"Goal time {value!r} is not HH:MM:SS", ok=False)


__all__ = ["TaskPanel"]
