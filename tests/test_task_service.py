from datetime import date, datetime

import pytest

from core.priorities import Scale, Status
from models.event import Event
from services.tasks import TaskService


@pytest.fixture()
def svc(session_factory):
    return TaskService(session_factory=session_factory)


def test_add_normalizes_scales_and_strips_title(svc):
    t = svc.add("  Repair water pump ", importance="High", urgency="Whenever", notes="")
    stored = svc.get(t.id)
    assert stored.title == "Repair water pump"
    assert stored.importance == Scale.HIGH.value
    assert stored.urgency == Scale.LOW.value
    assert stored.status == Status.TODO.value
    assert stored.notes is None


def test_marking_done_resets_scales_and_stamps_completion(svc):
    t = svc.add("Budget review", importance="Critical", urgency="Critical")
    done = svc.set_status(t.id, Status.DONE)
    assert done.status == "Done"
    assert done.importance == "Low" and done.urgency == "Low"
    assert done.completed_at is not None

    reopened = svc.set_status(t.id, "In Progress")
    assert reopened.status == "In Progress"
    assert reopened.completed_at is None
    assert reopened.importance == "Low"


def test_missing_rows(svc):
    assert svc.get(999) is None
    assert svc.update(999, title="x") is None
    assert svc.set_status(999, Status.DONE) is None
    assert svc.delete(999) is False


def test_update_ignores_unknown_fields(svc):
    t = svc.add("Soccer cleats")
    updated = svc.update(t.id, title="Buy soccer cleats", id=42, status="Done")
    assert updated.id == t.id
    assert updated.title == "Buy soccer cleats"
    assert updated.status == Status.TODO.value


def test_list_prioritized_filters(svc):
    low = svc.add("low", importance="Low", urgency="Low")
    urgent = svc.add("urgent", importance="Medium", urgency="Critical")
    top = svc.add("top", importance="Critical", urgency="High")
    finished = svc.add("finished", importance="Critical", urgency="Critical")
    svc.set_status(finished.id, Status.DONE)

    assert [t.title for t in svc.list_prioritized()] == ["top", "urgent", "low", "finished"]
    assert [t.title for t in svc.list_prioritized("todo")] == ["top", "urgent", "low"]
    assert [t.title for t in svc.list_prioritized("urgent")] == ["top", "urgent"]
    assert {low.id, urgent.id, top.id} <= {t.id for t in svc.list_all()}

    with pytest.raises(ValueError):
        svc.list_prioritized("everything")


def test_queue_and_calendar_visibility(svc):
    svc.add("overdue work", due=datetime(2024, 3, 1, 10, 0), calendar_id="work", importance="High")
    svc.add("overdue home", due=datetime(2024, 3, 2), importance="Low", urgency="Low")
    svc.add("undated", importance="Medium")
    svc.add("upcoming", due=datetime(2024, 3, 20))
    done = svc.add("done", due=datetime(2024, 3, 1))
    svc.set_status(done.id, Status.DONE)

    queue = svc.queue(date(2024, 3, 10))
    assert [t.title for t in queue.overdue] == ["overdue work", "overdue home"]
    assert [t.title for t in queue.undated] == ["undated"]

    only_unassigned = svc.queue(date(2024, 3, 10), {"unassigned"})
    assert [t.title for t in only_unassigned.overdue] == ["overdue home"]


def test_list_between_is_half_open(svc):
    svc.add("start", due=datetime(2024, 3, 3))
    svc.add("inside", due=datetime(2024, 3, 6, 13, 0))
    svc.add("end", due=datetime(2024, 3, 10))
    svc.add("undated")
    found = svc.list_between(datetime(2024, 3, 3), datetime(2024, 3, 10))
    assert [t.title for t in found] == ["start", "inside"]


def test_assign_and_unassign(svc):
    timed = svc.add("call", due=datetime(2024, 3, 1, 14, 30))
    loose = svc.add("errand")
    assert svc.assign_to_day(timed.id, date(2024, 3, 5)).due == datetime(2024, 3, 5, 14, 30)
    assert svc.assign_to_day(loose.id, date(2024, 3, 5)).due == datetime(2024, 3, 5, 9, 0)
    assert svc.unassign(loose.id).due is None
    assert svc.assign_to_day(12345, date(2024, 3, 5)) is None


def test_listeners_receive_ids_and_failures_do_not_abort(svc):
    seen = []

    def record(task_id):
        seen.append(task_id)

    def explode(task_id):
        raise RuntimeError("boom")

    TaskService.subscribe("after_create", record)
    TaskService.subscribe("after_create", explode)
    try:
        t = svc.add("watched")
        assert svc.get(t.id) is not None
        assert seen == [t.id]
        svc.add("silent", emit=False)
        assert seen == [t.id]
    finally:
        TaskService.unsubscribe("after_create", record)
        TaskService.unsubscribe("after_create", explode)

    with pytest.raises(ValueError):
        TaskService.subscribe("before_create", record)


def test_quick_add_places_medium_task_at_nine(svc):
    t = svc.quick_add(date(2024, 3, 5))
    assert t.title == "New Task"
    assert t.due == datetime(2024, 3, 5, 9, 0)
    assert (t.importance, t.urgency, t.status) == ("Medium", "Medium", "To Do")
    assert svc.quick_add().due is None


def test_create_from_event_copies_time_place_and_calendar(svc):
    event = Event(id=7, title="Council meeting", when=datetime(2024, 3, 5, 19, 0), location="Fellowship Hall", calendar_id="church")
    t = svc.create_from_event(event)
    stored = svc.get(t.id)
    assert stored.title == "Prep: Council meeting"
    assert stored.notes == "Task created from event: Council meeting"
    assert stored.due == datetime(2024, 3, 5, 19, 0)
    assert stored.location == "Fellowship Hall"
    assert stored.calendar_id == "church"


def test_queue_excludes_hidden_calendars_only(svc):
    svc.add("family inbox", calendar_id="family")
    svc.add("work inbox", calendar_id="work")
    svc.add("loose inbox")
    queue = svc.queue(date(2024, 3, 10), hidden_calendar_ids=["family"])
    assert sorted(t.title for t in queue.undated) == ["loose inbox", "work inbox"]
    assert svc.calendar_ids() == ["family", "work"]


def test_watch_reports_every_mutation_until_unwatched(svc):
    seen = []

    def record(task_id):
        seen.append(task_id)

    unwatch = TaskService.watch(record)
    try:
        t = svc.quick_add(date(2024, 3, 5))
        svc.unassign(t.id)
        svc.delete(t.id)
        assert seen == [t.id, t.id, t.id]
    finally:
        unwatch()
    svc.quick_add()
    assert len(seen) == 3
