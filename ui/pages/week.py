# ui/pages/week.py
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

import flet as ft

from core.priorities import is_done, priority_bgcolor, priority_color
from core.settings import UI, UNASSIGNED_CALENDAR_ID
from core.week_grid import TimeGridConfig, ZoomGesture, is_untimed, shift_week
from models.event import Event
from models.task import Task
from services.schedule import DayColumn, GridBlock, WeekLayout, WeekScheduleService, rescale_layout
from storage.config import toggle_calendar, update_config

THEME = UI.theme
DAY_COL_W = UI.day_column_width
HOURS_COL_W = UI.hours_column_width
SIDE_PANEL_W = UI.side_panel_width

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
VIEW_LABELS = {"grid": "Grid", "list": "List"}


def _calendar_label(calendar_id: str) -> str:
    return "Unassigned" if calendar_id == UNASSIGNED_CALENDAR_ID else calendar_id


class WeekPage:
    """Seven-column time grid with an untimed strip per day and a task queue.

    Pinch on the grid changes the hour height; the zoom is recomputed from
    the value captured at gesture start. Task changes come back through the
    shell's task listener, so actions here do not reload on their own.
    """

    def __init__(self, app):
        self.app = app
        self.svc = WeekScheduleService(app.tasks, app.events)
        self.anchor: date = date.today()
        self.zoom = ZoomGesture(pixels_per_hour=app.config.pixels_per_hour)
        self.layout: Optional[WeekLayout] = None
        self.view_mode = "grid"

        self.title_text = ft.Text("", size=22, weight=ft.FontWeight.BOLD)
        self.week_start_dd = ft.Dropdown(
            width=160,
            value=str(app.config.week_start_day),
            options=[ft.dropdown.Option(str(i), name) for i, name in enumerate(WEEKDAY_NAMES)],
            on_change=self._on_week_start_change,
        )
        self.reset_zoom_btn = ft.TextButton("Reset zoom", on_click=lambda e: self._reset_zoom(), visible=False)
        self.calendars_menu = ft.PopupMenuButton(icon=ft.Icons.FILTER_LIST, tooltip="Calendars", items=[])
        self.view_toggle = ft.SegmentedButton(
            selected={self.view_mode},
            segments=[ft.Segment(value=k, label=ft.Text(v)) for k, v in VIEW_LABELS.items()],
            on_change=self._on_view_change,
        )

        self.jump_picker = ft.DatePicker(
            first_date=date(2000, 1, 1),
            last_date=date(2100, 12, 31),
            on_change=lambda e: self.jump_to(e.control.value),
        )
        if self.jump_picker not in self.app.page.overlay:
            self.app.page.overlay.append(self.jump_picker)

        header = ft.Row(
            controls=[
                ft.Row(
                    [
                        ft.IconButton(icon=ft.Icons.CHEVRON_LEFT, tooltip="Previous week", on_click=lambda e: self.shift(-1)),
                        ft.IconButton(icon=ft.Icons.HOME, tooltip="This week", on_click=lambda e: self.go_home()),
                        ft.IconButton(icon=ft.Icons.CHEVRON_RIGHT, tooltip="Next week", on_click=lambda e: self.shift(1)),
                        ft.IconButton(
                            icon=ft.Icons.CALENDAR_MONTH,
                            tooltip="Jump to date",
                            on_click=lambda e: self.app.page.open(self.jump_picker),
                        ),
                    ],
                    spacing=6,
                ),
                self.title_text,
                ft.Row([self.reset_zoom_btn, self.view_toggle, self.calendars_menu, self.week_start_dd], spacing=8),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

        self.queue_list = ft.ListView(expand=True, spacing=6)
        side_panel = ft.Container(
            width=SIDE_PANEL_W,
            content=ft.Column(
                [
                    ft.Row(
                        [
                            ft.Text("Task queue", size=16, weight=ft.FontWeight.W_600),
                            ft.IconButton(
                                icon=ft.Icons.ADD,
                                tooltip="New undated task",
                                on_click=lambda e: self.app.tasks.quick_add(),
                            ),
                        ],
                        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                    ),
                    ft.Divider(height=1),
                    self.queue_list,
                ],
                expand=True,
                spacing=8,
            ),
            padding=10,
            border=ft.border.all(0.5, THEME.outline),
            border_radius=8,
        )

        self.grid = ft.Container(expand=True)
        zoomable = ft.GestureDetector(
            content=self.grid,
            on_scale_start=self._on_scale_start,
            on_scale_update=self._on_scale_update,
            on_scale_end=self._on_scale_end,
            expand=True,
        )

        self.view = ft.Container(
            content=ft.Column(
                [header, ft.Divider(height=1), ft.Row([side_panel, zoomable], expand=True, spacing=12)],
                spacing=12,
                expand=True,
            ),
            expand=True,
            padding=20,
        )

    # ===== navigation =====
    def shift(self, weeks: int):
        self.anchor = shift_week(self.anchor, weeks)
        self.load()

    def go_home(self):
        self.anchor = date.today()
        self.load()

    def jump_to(self, value):
        if value is None:
            return
        self.anchor = value.date() if isinstance(value, datetime) else value
        self.load()

    def _on_week_start_change(self, e):
        self.app.config = update_config(week_start_day=int(self.week_start_dd.value or 0))
        self.load()

    def _on_view_change(self, e):
        self.view_mode = next(iter(self.view_toggle.selected), "grid")
        self._render_grid()

    # ===== calendars =====
    def _toggle_calendar(self, calendar_id: str):
        self.app.config = toggle_calendar(calendar_id)
        self.load()

    def _render_calendars_menu(self):
        hidden = set(self.app.config.hidden_calendar_ids)
        self.calendars_menu.items = [
            ft.PopupMenuItem(
                text=_calendar_label(cid),
                checked=cid not in hidden,
                on_click=lambda e, cid=cid: self._toggle_calendar(cid),
            )
            for cid in self.svc.calendar_ids()
        ]

    # ===== zoom =====
    def _on_scale_start(self, e):
        self.zoom.start()

    def _on_scale_update(self, e):
        before = self.zoom.pixels_per_hour
        after = self.zoom.update(getattr(e, "scale", None))
        if after != before:
            self._render_grid()

    def _on_scale_end(self, e):
        self.zoom.end()
        self.app.config = update_config(pixels_per_hour=self.zoom.pixels_per_hour)

    def _reset_zoom(self):
        self.zoom.reset()
        self.app.config = update_config(pixels_per_hour=self.zoom.pixels_per_hour)
        self._render_grid()

    # ===== data =====
    def load(self):
        self.layout = self.svc.build(
            self.anchor,
            config=TimeGridConfig(pixels_per_hour=self.zoom.pixels_per_hour),
            week_start_day=self.app.config.week_start_day,
            hidden_calendar_ids=self.app.config.hidden_calendar_ids,
        )
        first, last = self.layout.days[0].day, self.layout.days[-1].day
        self.title_text.value = f"{first:%b %d} – {last:%b %d, %Y}"
        self._render_calendars_menu()
        self._render_queue()
        self._render_grid()

    # ===== rendering =====
    def _queue_chip(self, t: Task, overdue: bool) -> ft.Control:
        return ft.Container(
            content=ft.Column(
                [
                    ft.Text(t.title, size=13, weight=ft.FontWeight.W_500),
                    ft.Text(f"{t.importance} / {t.urgency}", size=11, color=THEME.text_subtle),
                ],
                spacing=2,
            ),
            padding=8,
            border_radius=6,
            border=ft.border.all(0.5, THEME.overdue_text if overdue else THEME.outline),
            on_click=lambda e, tid=t.id: self.app.tasks.assign_to_day(tid, date.today()),
            tooltip="Schedule for today",
        )

    def _render_queue(self):
        self.queue_list.controls.clear()
        queue = self.layout.queue
        if queue.overdue:
            self.queue_list.controls.append(ft.Text("Overdue", size=12, color=THEME.overdue_text, weight=ft.FontWeight.BOLD))
            self.queue_list.controls.extend(self._queue_chip(t, True) for t in queue.overdue)
        if queue.undated:
            self.queue_list.controls.append(ft.Text("No date", size=12, color=THEME.text_subtle, weight=ft.FontWeight.BOLD))
            self.queue_list.controls.extend(self._queue_chip(t, False) for t in queue.undated)

    def _item_action(self, item) -> ft.Control:
        if isinstance(item, Event):
            return ft.IconButton(
                icon=ft.Icons.ADD_TASK,
                icon_size=12,
                width=18,
                height=18,
                padding=0,
                tooltip="Create prep task",
                on_click=lambda e, ev=item: self.app.tasks.create_from_event(ev),
            )
        return ft.IconButton(
            icon=ft.Icons.CLOSE,
            icon_size=12,
            width=18,
            height=18,
            padding=0,
            tooltip="Unschedule",
            on_click=lambda e, tid=item.id: self.app.tasks.unassign(tid),
        )

    def _block(self, block: GridBlock) -> ft.Control:
        if block.kind == "event":
            title, when, bg = block.item.title, block.item.when, THEME.event_bg
        else:
            title, when, bg = block.item.title, block.item.due, priority_bgcolor(block.priority)
        return ft.Container(
            top=block.top,
            left=2,
            right=2,
            height=block.height,
            bgcolor=bg,
            border=ft.border.only(left=ft.BorderSide(3, priority_color(block.priority))),
            border_radius=4,
            padding=ft.padding.only(left=4, right=2, top=2),
            content=ft.Row(
                [
                    ft.Text(f"{when:%H:%M} {title}", size=10, no_wrap=True, overflow=ft.TextOverflow.ELLIPSIS, expand=True),
                    self._item_action(block.item),
                ],
                spacing=2,
                vertical_alignment=ft.CrossAxisAlignment.START,
            ),
        )

    def _agenda_entry(self, item) -> ft.Control:
        if isinstance(item, Event):
            label, bg, style = f"{item.when:%H:%M} {item.title}", THEME.event_bg, None
        else:
            label = item.title if is_untimed(item.due) else f"{item.due:%H:%M} {item.title}"
            bg = THEME.chip
            style = ft.TextStyle(decoration=ft.TextDecoration.LINE_THROUGH) if is_done(item.status) else None
        return ft.Container(
            content=ft.Row(
                [
                    ft.Text(label, size=11, style=style, no_wrap=True, overflow=ft.TextOverflow.ELLIPSIS, expand=True),
                    self._item_action(item),
                ],
                spacing=2,
            ),
            bgcolor=bg,
            border_radius=4,
            padding=4,
        )

    def _day_header(self, col: DayColumn) -> ft.Control:
        return ft.Row(
            [
                ft.Text(f"{col.day:%a %d}", size=13, weight=ft.FontWeight.W_600),
                ft.IconButton(
                    icon=ft.Icons.ADD,
                    icon_size=14,
                    tooltip="Add task",
                    on_click=lambda e, d=col.day.date(): self.app.tasks.quick_add(d),
                ),
            ],
            alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
        )

    def _day_column(self, col: DayColumn) -> ft.Control:
        if self.view_mode == "list":
            body: List[ft.Control] = [ft.Column([self._agenda_entry(it) for it in col.agenda], spacing=2)]
        else:
            pph = self.layout.config.pixels_per_hour
            hour_lines: List[ft.Control] = [
                ft.Container(top=i * pph, left=0, right=0, height=1, bgcolor=THEME.outline)
                for i in range(len(self.layout.hour_labels))
            ]
            blocks = [self._block(b) for b in col.blocks if b.visible]
            untimed = [
                ft.Container(
                    content=ft.Text(t.title, size=10, color=THEME.chip_text, no_wrap=True, overflow=ft.TextOverflow.ELLIPSIS),
                    bgcolor=THEME.chip,
                    border_radius=4,
                    padding=4,
                )
                for t in col.untimed
            ]
            body = [ft.Column(untimed, spacing=2), ft.Stack(hour_lines + blocks, height=self.layout.grid_height)]
        return ft.Container(
            width=DAY_COL_W,
            bgcolor=THEME.today_bg if col.is_today else None,
            content=ft.Column([self._day_header(col)] + body, spacing=4),
        )

    def _render_grid(self):
        if self.layout is None:
            return
        if self.layout.config.pixels_per_hour != self.zoom.pixels_per_hour:
            self.layout = rescale_layout(self.layout, self.zoom.pixels_per_hour)
        columns = [self._day_column(c) for c in self.layout.days]
        if self.view_mode == "grid":
            cfg = self.layout.config
            hours = ft.Column(
                [ft.Container(height=cfg.pixels_per_hour, content=ft.Text(h, size=10, color=THEME.text_subtle)) for h in self.layout.hour_labels],
                spacing=0,
                width=HOURS_COL_W,
            )
            columns = [hours] + columns
        self.grid.content = ft.Row(
            columns,
            spacing=0,
            scroll=ft.ScrollMode.AUTO,
            vertical_alignment=ft.CrossAxisAlignment.END if self.view_mode == "grid" else ft.CrossAxisAlignment.START,
        )
        self.reset_zoom_btn.visible = self.view_mode == "grid" and not self.zoom.is_default
        self.app.page.update()
