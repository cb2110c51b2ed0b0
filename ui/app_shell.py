# ui/app_shell.py
from __future__ import annotations

import flet as ft

from core.log import get_logger
from core.settings import UI
from services.events import EventService
from services.tasks import TaskService
from storage.config import load_config

# pages
from .pages.tasks import TasksPage
from .pages.week import WeekPage


class AppShell:
    def __init__(self, page: ft.Page):
        self.page = page
        self.config = load_config()
        self.logger = get_logger("app", level=self.config.log_level)

        self.page.title = UI.app_title
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.vertical_alignment = ft.MainAxisAlignment.START

        self.tasks = TaskService()
        self.events = EventService()
        self._unwatch_tasks = TaskService.watch(self._on_tasks_changed)
        self.page.on_disconnect = lambda e: self._unwatch_tasks()

        self._tasks_page = TasksPage(self)
        self._week_page = WeekPage(self)
        self._pages = [self._tasks_page, self._week_page]

        self.content = ft.Container(expand=True)

        self.nav = ft.NavigationRail(
            selected_index=0,
            label_type=ft.NavigationRailLabelType.ALL,
            min_width=90,
            group_alignment=-0.9,
            on_change=self.on_nav_change,
            destinations=[
                ft.NavigationRailDestination(
                    icon=ft.Icons.CHECK_CIRCLE_OUTLINE,
                    selected_icon=ft.Icons.CHECK_CIRCLE,
                    label="Tasks",
                ),
                ft.NavigationRailDestination(
                    icon=ft.Icons.CALENDAR_MONTH_OUTLINED,
                    selected_icon=ft.Icons.CALENDAR_MONTH,
                    label="Week",
                ),
            ],
        )

        self.root = ft.Row(
            controls=[
                ft.Container(self.nav, width=88, bgcolor=UI.theme.safe_surface_bg),
                ft.VerticalDivider(width=1),
                self.content,
            ],
            expand=True,
            spacing=0,
        )

    def mount(self):
        self.page.add(self.root)
        self.show(0)

    def show(self, index: int):
        target = self._pages[index]
        self.content.content = target.view
        self.logger.info("Showing %s", type(target).__name__)
        target.load()

    def on_nav_change(self, e):
        self.show(e.control.selected_index)

    def _on_tasks_changed(self, task_id: int):
        # any task mutation refreshes whichever page is on screen
        self._pages[self.nav.selected_index or 0].load()

    def toast(self, message: str):
        self.page.open(ft.SnackBar(ft.Text(message)))
