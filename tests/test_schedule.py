from datetime import date, datetime

import pytest

from core.week_grid import TimeGridConfig
from models import Event, Task
from services.events import EventService
from services.schedule import WeekScheduleService, layout_week, rescale_layout
from services.tasks import TaskService

ANCHOR = date(2024, 3, 6)  # Wednesday


def _week_tasks():
    return [
        Task(id=1, title="pump", due=datetime(2024, 3, 4, 9, 30), duration_minutes=90, importance="High", urgency="Critical"),
        Task(id=2, title="cleats", due=datetime(2024, 3, 4), importance="Medium", urgency="Medium"),
        Task(id=3, title="budget", due=datetime(2024, 3, 4), importance="Critical", urgency="High"),
        Task(id=4, title="late", due=datetime(2024, 3, 5, 23, 0)),
        Task(id=5, title="work only", due=datetime(2024, 3, 6, 10, 0), calendar_id="work"),
        Task(id=6, title="someday"),
    ]


def _week_events():
    return [
        Event(id=1, title="council", when=datetime(2024, 3, 4, 8, 0)),
        Event(id=2, title="hidden", when=datetime(2024, 3, 4, 12, 0), is_hidden=True),
    ]


def test_layout_week_places_blocks():
    layout = layout_week(_week_tasks(), _week_events(), ANCHOR, config=TimeGridConfig(), week_start_day=1, today=ANCHOR)

    assert [c.day for c in layout.days][0] == datetime(2024, 3, 4)
    assert len(layout.days) == 7
    assert [c.is_today for c in layout.days].index(True) == 2
    assert layout.grid_height == 960

    monday = layout.days[0]
    assert [t.title for t in monday.untimed] == ["budget", "cleats"]
    assert [(b.kind, b.item.title) for b in monday.blocks] == [("event", "council"), ("task", "pump")]
    event_block, task_block = monday.blocks
    assert event_block.top == 120.0 and event_block.height == 60.0
    assert task_block.top == 210.0 and task_block.height == 90.0
    assert task_block.priority == 36

    tuesday = layout.days[1]
    assert tuesday.blocks[0].visible is False
    assert [t.title for t in layout.queue.undated] == ["someday"]


def test_layout_week_respects_visible_calendars():
    layout = layout_week(
        _week_tasks(),
        _week_events(),
        ANCHOR,
        config=TimeGridConfig(),
        week_start_day=1,
        visible_calendar_ids=["unassigned"],
        today=ANCHOR,
    )
    wednesday = layout.days[2]
    assert wednesday.blocks == []


def test_rescale_layout_moves_blocks_with_zoom():
    layout = layout_week(_week_tasks(), _week_events(), ANCHOR, config=TimeGridConfig(), week_start_day=1, today=ANCHOR)
    zoomed = rescale_layout(layout, 120)
    block = zoomed.days[0].blocks[1]
    assert block.top == 420.0
    assert block.height == 180.0
    assert zoomed.grid_height == 1920
    assert layout.days[0].blocks[1].top == 210.0


def test_end_to_end_week_from_database(session_factory):
    tasks = TaskService(session_factory=session_factory)
    events = EventService(session_factory=session_factory)
    tasks.add("overdue", due=datetime(2024, 2, 20, 9, 0), importance="High")
    tasks.add("pump", due=datetime(2024, 3, 4, 9, 30), importance="Critical", urgency="Critical")
    tasks.add("inbox")
    hidden = events.add("private", datetime(2024, 3, 5, 18, 0))
    events.set_hidden(hidden.id)
    events.add("council", datetime(2024, 3, 5, 19, 0), location="Fellowship Hall")

    layout = WeekScheduleService(tasks, events).build(ANCHOR, week_start_day=1, today=date(2024, 3, 4))

    assert [b.item.title for b in layout.days[0].blocks] == ["pump"]
    assert [b.item.title for b in layout.days[1].blocks] == ["council"]
    assert [t.title for t in layout.queue.overdue] == ["overdue"]
    assert [t.title for t in layout.queue.undated] == ["inbox"]


def test_invalid_grid_config_is_rejected():
    with pytest.raises(ValueError):
        TimeGridConfig(start_hour=6, end_hour=25)


def test_hiding_one_calendar_keeps_events_from_others():
    tasks = [Task(id=1, title="recital", due=datetime(2024, 3, 4, 17, 0), calendar_id="family")]
    events = [Event(id=1, title="standup", when=datetime(2024, 3, 4, 9, 0), calendar_id="work")]
    layout = layout_week(
        tasks,
        events,
        ANCHOR,
        config=TimeGridConfig(),
        week_start_day=1,
        hidden_calendar_ids=["family"],
        today=ANCHOR,
    )
    assert [(b.kind, b.item.title) for b in layout.days[0].blocks] == [("event", "standup")]


def test_agenda_lists_events_then_untimed_then_timed():
    layout = layout_week(_week_tasks(), _week_events(), ANCHOR, config=TimeGridConfig(), week_start_day=1, today=ANCHOR)
    assert [it.title for it in layout.days[0].agenda] == ["council", "budget", "cleats", "pump"]
    # blocks outside the visible hours still appear in the list
    assert [it.title for it in layout.days[1].agenda] == ["late"]


def test_build_with_hidden_calendar_and_known_calendars(session_factory):
    tasks = TaskService(session_factory=session_factory)
    events = EventService(session_factory=session_factory)
    tasks.add("recital", due=datetime(2024, 3, 4, 17, 0), calendar_id="family")
    tasks.add("family chores", calendar_id="family")
    tasks.add("inbox")
    events.add("standup", datetime(2024, 3, 4, 9, 0), calendar_id="work")

    svc = WeekScheduleService(tasks, events)
    assert svc.calendar_ids() == ["unassigned", "family", "work"]

    layout = svc.build(ANCHOR, week_start_day=1, hidden_calendar_ids=["family"], today=date(2024, 3, 4))
    assert [b.item.title for b in layout.days[0].blocks] == ["standup"]
    assert [t.title for t in layout.queue.undated] == ["inbox"]
