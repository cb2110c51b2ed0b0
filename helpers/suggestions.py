"""Form hints derived from the priority engine."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from core.priorities import Scale, date_suggests_critical_urgency, normalize_scale

OVERDUE_MESSAGE = "Date is today or past due. Urgency suggested: Critical."


@dataclass(frozen=True)
class UrgencySuggestion:
    urgency: Scale
    message: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.message is not None


def suggest_urgency_for_due(
    due: Optional[Union[date, datetime]],
    current_urgency: Union[Scale, str, None],
    *,
    today: Optional[Union[date, datetime]] = None,
) -> UrgencySuggestion:
    """Escalate to Critical when the picked due date is today or earlier.

    The form applies the suggestion; the user may still override it.
    """
    current = normalize_scale(current_urgency)
    if due is None:
        return UrgencySuggestion(urgency=current)
    reference = today or datetime.now()
    if date_suggests_critical_urgency(due, reference):
        return UrgencySuggestion(urgency=Scale.CRITICAL, message=OVERDUE_MESSAGE)
    return UrgencySuggestion(urgency=current)


__all__ = ["OVERDUE_MESSAGE", "UrgencySuggestion", "suggest_urgency_for_due"]
