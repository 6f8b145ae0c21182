# ui/app_shell.py
from __future__ import annotations

import flet as ft

from core.logs import get_logger
from core.settings import UI
from services.countdown import CountdownService
from services.study_tasks import StudyTaskService
from services.ticker import AsyncTicker
from storage.config import AppConfig
from storage.repositories import ExamRepository, StudyTaskRepository
from storage.store import KeyValueStore

from .countdown_panel import CountdownPanel
from .task_panel import TaskPanel

log = get_logger("ui")


class AppShell:
    def __init__(self, page: ft.Page, store: KeyValueStore, config: AppConfig):
        self.page = page

        # базовые настройки окна
        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.CENTER
        self.page.vertical_alignment = ft.MainAxisAlignment.START
        self.page.scroll = ft.ScrollMode.AUTO

        # one ticker for the page; loops run on Flet's event loop
        self.ticker = AsyncTicker(spawn=self.page.run_task)
        self.tasks = StudyTaskService(
            StudyTaskRepository(store),
            self.ticker,
            strict_goal_time=config.strict_goal_time,
        )
        self.countdown = CountdownService(ExamRepository(store), self.ticker)

        self._countdown = CountdownPanel(self)
        self._tasks = TaskPanel(self)

        self.root = ft.Column(
            controls=[
                self._countdown.view,
                ft.Divider(height=1),
                self._tasks.view,
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=8,
        )

    # ---------- монтаж ----------
    def mount(self):
        self.page.controls.clear()
        self.page.add(self.root)

        self.tasks.load()
        self.countdown.load()
        self._countdown.render()
        self._tasks.render()

        self.page.on_disconnect = lambda e: self.unmount()
        self.page.on_close = lambda e: self.unmount()
        self.page.update()
        log.info("Page mounted (web=%s)", getattr(self.page, "web", False))

    def unmount(self):
        self.tasks.shutdown()
        self.countdown.shutdown()
        log.info("Tickers detached")

    # ---------- публичные утилиты для панелей ----------
    def toast(self, text: str, ok: bool = True):
        snack = ft.SnackBar(
            ft.Text(text),
            bgcolor=None if ok else ft.Colors.ERROR_CONTAINER,
        )
        self.page.open(snack)


__all__ = ["AppShell"]
