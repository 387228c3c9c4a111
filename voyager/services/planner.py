"""
Plan factory - Builds new trips and schedule entries.
"""
import logging
import uuid
from datetime import date, timedelta
from typing import Optional, Union

from ..models.plan import DayPlan, ScheduleItem, TravelPlan

logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY = "New Activity"


class PlanError(ValueError):
    """Base error for rejected plan requests."""


class InvalidRangeError(PlanError):
    """Raised when a trip's end date falls before its start date."""


class InvalidDestinationError(PlanError):
    """Raised when a trip has no destination."""


def new_id() -> str:
    """Generate a fresh unique identifier."""
    return str(uuid.uuid4())


def _coerce_date(value: Union[date, str], label: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise InvalidRangeError(f"{label} is not a valid date: {value!r}") from e


def create_plan(
    destination: str,
    start_date: Union[date, str],
    end_date: Union[date, str]
) -> TravelPlan:
    """
    Create a new trip with one empty day per calendar date.

    Args:
        destination: Where the trip goes (trimmed, must not be blank)
        start_date: First day of the trip
        end_date: Last day of the trip (inclusive)

    Returns:
        A fresh plan with an empty shopping list

    Raises:
        InvalidDestinationError: If the destination is blank
        InvalidRangeError: If end_date is before start_date
    """
    name = (destination or "").strip()
    if not name:
        raise InvalidDestinationError("Destination must not be empty")

    start = _coerce_date(start_date, "start date")
    end = _coerce_date(end_date, "end date")
    if end < start:
        raise InvalidRangeError(
            f"End date {end.isoformat()} is before start date {start.isoformat()}"
        )

    days = [
        DayPlan(id=new_id(), date=start + timedelta(days=offset))
        for offset in range((end - start).days + 1)
    ]
    plan = TravelPlan(
        id=new_id(),
        destination=name,
        start_date=start,
        end_date=end,
        days=days,
    )
    logger.info(f"Created plan {plan.id} for {name}: {len(days)} day(s)")
    return plan


def new_schedule_item(
    start_time: str,
    end_time: str,
    activity: Optional[str] = None
) -> ScheduleItem:
    """Create a schedule item with default fields."""
    return ScheduleItem(
        id=new_id(),
        start_time=start_time,
        end_time=end_time,
        is_range=True,
        activity=activity or DEFAULT_ACTIVITY,
        content="",
    )


def rename_destination(plan: TravelPlan, destination: str) -> TravelPlan:
    """Rename the trip; a blank name leaves the plan unchanged."""
    name = (destination or "").strip()
    if not name:
        return plan
    return plan.model_copy(update={"destination": name})
