# ui/pages/tasks.py
from __future__ import annotations

import flet as ft

from core.priorities import (
    Scale,
    Status,
    is_done,
    item_priority,
    priority,
    priority_bgcolor,
    priority_color,
    scale_options,
)
from core.settings import UI
from helpers.datetime_utils import duration_from_parts, parse_due_input
from helpers.suggestions import suggest_urgency_for_due
from models.task import Task

THEME = UI.theme

FILTER_LABELS = {"all": "All", "todo": "To do", "urgent": "Urgent"}


class TasksPage:
    """Flat task list ranked by priority score, with a quick-add form."""

    def __init__(self, app):
        self.app = app
        self.filter_name = "todo"
        scale_opts = [ft.dropdown.Option(key, label) for key, label in scale_options().items()]

        self.title_field = ft.TextField(label="Task", expand=True)
        self.due_field = ft.TextField(label="Due (YYYY-MM-DD or YYYY-MM-DDTHH:MM)", width=260, on_change=self._on_due_change)
        self.hours_field = ft.TextField(label="h", width=60, value="0")
        self.minutes_field = ft.TextField(label="min", width=70, value="0")
        self.importance_dd = ft.Dropdown(label="Importance", width=170, value=Scale.MEDIUM.value, options=scale_opts, on_change=self._refresh_preview)
        self.urgency_dd = ft.Dropdown(label="Urgency", width=170, value=Scale.MEDIUM.value, options=list(scale_opts), on_change=self._refresh_preview)
        self.preview = ft.Text("", size=14, weight=ft.FontWeight.BOLD)
        self.hint = ft.Text("", size=12, color=THEME.overdue_text)

        self.filters = ft.SegmentedButton(
            selected={self.filter_name},
            segments=[ft.Segment(value=k, label=ft.Text(v)) for k, v in FILTER_LABELS.items()],
            on_change=self._on_filter_change,
        )
        self.list_view = ft.ListView(expand=True, spacing=6)

        form = ft.Column(
            [
                ft.Row([self.title_field, ft.ElevatedButton("Add", icon=ft.Icons.ADD, on_click=self._on_add)]),
                ft.Row([self.due_field, self.hours_field, self.minutes_field, self.importance_dd, self.urgency_dd, self.preview], wrap=True),
                self.hint,
            ],
            spacing=8,
        )

        self.view = ft.Container(
            content=ft.Column(
                [ft.Text("Tasks", size=22, weight=ft.FontWeight.BOLD), form, ft.Divider(height=1), self.filters, self.list_view],
                spacing=12,
                expand=True,
            ),
            expand=True,
            padding=20,
        )
        self._refresh_preview()

    # ===== form =====
    def _on_due_change(self, e):
        suggestion = suggest_urgency_for_due(parse_due_input(self.due_field.value), self.urgency_dd.value)
        self.urgency_dd.value = suggestion.urgency.value
        self.hint.value = suggestion.message or ""
        self._refresh_preview()

    def _refresh_preview(self, e=None):
        score = priority(self.importance_dd.value, self.urgency_dd.value, Status.TODO)
        self.preview.value = f"Priority score: {score}"
        self.preview.color = priority_color(score)
        if e is not None:
            self.app.page.update()

    def _on_add(self, e):
        title = (self.title_field.value or "").strip()
        if not title:
            self.app.toast("Task title is required")
            return
        due = parse_due_input(self.due_field.value)
        duration = duration_from_parts(self.hours_field.value, self.minutes_field.value)
        self.title_field.value = ""
        self.due_field.value = ""
        self.hint.value = ""
        # the shell reloads the list once the task is stored
        self.app.tasks.add(
            title,
            due=due,
            duration_minutes=duration,
            importance=self.importance_dd.value,
            urgency=self.urgency_dd.value,
        )

    def _on_filter_change(self, e):
        self.filter_name = next(iter(self.filters.selected), "all")
        self.load()

    # ===== list =====
    def _toggle_done(self, task: Task, checked: bool):
        self.app.tasks.set_status(task.id, Status.DONE if checked else Status.TODO)

    def _row(self, task: Task) -> ft.Control:
        score = item_priority(task)
        due = f"{task.due:%Y-%m-%d %H:%M}" if task.due else "no date"
        return ft.Container(
            content=ft.Row(
                [
                    ft.Checkbox(value=is_done(task.status), on_change=lambda e, t=task: self._toggle_done(t, e.control.value)),
                    ft.Container(
                        content=ft.Text(str(score), color="#FFFFFF", weight=ft.FontWeight.BOLD),
                        width=36,
                        height=36,
                        alignment=ft.alignment.center,
                        bgcolor=priority_color(score),
                        border_radius=18,
                        tooltip="Priority score",
                    ),
                    ft.Column(
                        [
                            ft.Text(task.title, size=14, weight=ft.FontWeight.W_500),
                            ft.Text(f"{task.importance} importance · {task.urgency} urgency · {due}", size=11, color=THEME.text_subtle),
                        ],
                        spacing=2,
                        expand=True,
                    ),
                    ft.IconButton(icon=ft.Icons.DELETE_OUTLINE, tooltip="Delete", on_click=lambda e, tid=task.id: self._delete(tid)),
                ],
                vertical_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            bgcolor=priority_bgcolor(score),
            border_radius=8,
            padding=8,
        )

    def _delete(self, task_id: int):
        self.app.tasks.delete(task_id)

    def load(self):
        self.list_view.controls = [self._row(t) for t in self.app.tasks.list_prioritized(self.filter_name)]
        self.app.page.update()
