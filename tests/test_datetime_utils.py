from datetime import datetime

from core.priorities import Scale
from core.week_grid import is_untimed
from helpers.datetime_utils import duration_from_parts, parse_due_input
from helpers.suggestions import OVERDUE_MESSAGE, suggest_urgency_for_due


def test_parse_due_input_date_only_is_untimed_midnight():
    parsed = parse_due_input("2024-03-01")
    assert parsed == datetime(2024, 3, 1)
    assert is_untimed(parsed)


def test_parse_due_input_datetime():
    assert parse_due_input("2024-03-01T14:30") == datetime(2024, 3, 1, 14, 30)
    assert parse_due_input(" 2024-03-01T00:01:00 ") == datetime(2024, 3, 1, 0, 1)


def test_parse_due_input_rejects_garbage():
    assert parse_due_input(None) is None
    assert parse_due_input("   ") is None
    assert parse_due_input("2024-13-45") is None
    assert parse_due_input("next tuesday") is None


def test_duration_from_parts():
    assert duration_from_parts(1, 30) == 90
    assert duration_from_parts("0", "45") == 45
    assert duration_from_parts(0, 0) is None
    assert duration_from_parts("x", None) is None
    assert duration_from_parts(-2, 15) == 15


def test_due_today_escalates_urgency():
    today = datetime(2024, 3, 1, 8, 0)
    hint = suggest_urgency_for_due(datetime(2024, 3, 1, 23, 59), "Medium", today=today)
    assert hint.urgency is Scale.CRITICAL
    assert hint.message == OVERDUE_MESSAGE
    assert hint.changed


def test_future_or_missing_due_keeps_urgency():
    today = datetime(2024, 3, 1, 8, 0)
    hint = suggest_urgency_for_due(datetime(2024, 3, 2), "High", today=today)
    assert hint.urgency is Scale.HIGH
    assert not hint.changed
    assert suggest_urgency_for_due(None, "bogus", today=today).urgency is Scale.LOW
