"""
Schedule normalizer - Keeps each day's activities ordered by start time.

All functions are pure: they return new values and never touch the input.
"""
import logging
from typing import Any, Callable, Mapping, Optional, Tuple

from ..models.plan import DayPlan, ScheduleItem, TravelPlan, format_hhmm, parse_hhmm
from .planner import new_schedule_item

logger = logging.getLogger(__name__)

DEFAULT_SLOT = ("09:00", "10:00")
FALLBACK_SLOT = ("12:00", "13:00")

# Maps camelCase aliases to attribute names; "id" is never updatable.
_UPDATABLE_FIELDS = {
    (field.alias or name): name
    for name, field in ScheduleItem.model_fields.items()
    if name != "id"
}
_UPDATABLE_FIELDS.update({name: name for name in ScheduleItem.model_fields if name != "id"})


def _sorted_items(items: list[ScheduleItem]) -> list[ScheduleItem]:
    # sorted() is stable, equal start times keep insertion order
    return sorted(items, key=lambda item: item.start_time)


def _add_hours(hour: int, minute: int, hours: int) -> Tuple[int, int]:
    # Wraps on a 24-hour clock and stays on the same day
    return (hour + hours) % 24, minute


def infer_next_slot(day: DayPlan) -> Tuple[str, str]:
    """
    Suggest start/end times for a new activity.

    The new slot starts one hour after the last activity (its end time
    for ranges, its start time otherwise) and lasts one hour. Empty days
    start at 09:00; an unreadable reference time yields 12:00-13:00.
    """
    if not day.items:
        return DEFAULT_SLOT

    last = day.items[-1]
    reference = last.end_time if last.is_range else last.start_time
    parsed = parse_hhmm(reference)
    if parsed is None:
        logger.debug(f"Unreadable reference time {reference!r} on {day.date}, using fallback slot")
        return FALLBACK_SLOT

    start = _add_hours(*parsed, 1)
    end = _add_hours(*start, 1)
    return format_hhmm(*start), format_hhmm(*end)


def add_item(day: DayPlan, activity: Optional[str] = None) -> DayPlan:
    """Append a new activity in the next free slot and re-sort the day."""
    start_time, end_time = infer_next_slot(day)
    item = new_schedule_item(start_time, end_time, activity)
    return day.model_copy(update={"items": _sorted_items([*day.items, item])})


def _resolve_updates(updates: Mapping[str, Any]) -> dict:
    resolved = {}
    for key, value in updates.items():
        name = _UPDATABLE_FIELDS.get(key)
        if name is not None:
            resolved[name] = value
    return resolved


def update_item(day: DayPlan, item_id: str, updates: Mapping[str, Any]) -> DayPlan:
    """
    Merge partial fields into one activity and re-sort the day.

    Args:
        day: Day containing the activity
        item_id: Identifier of the activity to change
        updates: Field values keyed by attribute name or camelCase alias;
            unknown keys and "id" are ignored

    Returns:
        The updated day, or the same day if no activity matches
    """
    if not any(item.id == item_id for item in day.items):
        return day

    changes = _resolve_updates(updates)
    items = []
    for item in day.items:
        if item.id == item_id:
            # Re-validate so updated times get the same normalization as new ones
            item = ScheduleItem.model_validate({**item.model_dump(), **changes})
        items.append(item)
    return day.model_copy(update={"items": _sorted_items(items)})


def delete_item(day: DayPlan, item_id: str) -> DayPlan:
    """Remove an activity; unknown ids leave the day unchanged."""
    if not any(item.id == item_id for item in day.items):
        return day
    return day.model_copy(update={"items": [item for item in day.items if item.id != item_id]})


def _map_day(plan: TravelPlan, day_id: str, change: Callable[[DayPlan], DayPlan]) -> TravelPlan:
    day = plan.get_day(day_id)
    if day is None:
        return plan
    updated = change(day)
    if updated is day:
        return plan
    days = [updated if d.id == day_id else d for d in plan.days]
    return plan.model_copy(update={"days": days})


def add_item_to_plan(plan: TravelPlan, day_id: str, activity: Optional[str] = None) -> TravelPlan:
    return _map_day(plan, day_id, lambda day: add_item(day, activity))


def update_item_in_plan(
    plan: TravelPlan,
    day_id: str,
    item_id: str,
    updates: Mapping[str, Any]
) -> TravelPlan:
    return _map_day(plan, day_id, lambda day: update_item(day, item_id, updates))


def delete_item_from_plan(plan: TravelPlan, day_id: str, item_id: str) -> TravelPlan:
    return _map_day(plan, day_id, lambda day: delete_item(day, item_id))


def find_item(plan: TravelPlan, day_id: str, item_id: str) -> Optional[ScheduleItem]:
    """Get an activity by day and item ID."""
    day = plan.get_day(day_id)
    if day is None:
        return None
    return next((item for item in day.items if item.id == item_id), None)
