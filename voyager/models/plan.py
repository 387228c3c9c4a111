"""
Plan models - The persisted trip document.

Every model is immutable; changes are made by building a new value
(``model_copy``) and handing it back to the plan store. Field aliases
match the camelCase keys of the saved/exported JSON document.
"""
import datetime
import re
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_hhmm(value: Optional[str]) -> Optional[tuple[int, int]]:
    """Parse an ``H:MM``/``HH:MM`` string into (hour, minute), or None if malformed."""
    if not isinstance(value, str):
        return None
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return hour, minute


def format_hhmm(hour: int, minute: int) -> str:
    """Format a clock time as zero-padded ``HH:MM``."""
    return f"{hour:02d}:{minute:02d}"


class ShoppingCategory(str, Enum):
    """Shopping list categories."""
    FOOD_AND_DRINKS = "Food and Drinks"
    LUXURY = "Luxury"
    CLOTHING = "Clothing"
    ELECTRONICS = "Electronics"
    COSMETICS = "Cosmetics"
    OTHER = "Other"


class ShoppingFilter(str, Enum):
    """Status filter for the shopping list view."""
    ALL = "All"
    COMPLETED = "Completed"
    PENDING = "Pending"


class PlanModel(BaseModel):
    """Base for all document models."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class GroundingLink(PlanModel):
    """A titled link returned by a location or transit lookup."""
    title: str
    uri: str


class ScheduleItem(PlanModel):
    """A single timed activity within a day."""
    id: str = Field(..., description="Unique item identifier")
    start_time: str = Field(
        ...,
        alias="startTime",
        description="Start time, zero-padded 'HH:MM'"
    )
    end_time: str = Field(
        default="",
        alias="endTime",
        description="End time, only meaningful when is_range is set"
    )
    is_range: bool = Field(
        default=True,
        alias="isRange",
        description="Whether the activity spans start_time to end_time"
    )
    activity: str = Field(..., description="Short activity title")
    content: Optional[str] = Field(None, description="Free-text notes")
    location: Optional[str] = Field(None, description="Resolved place name")
    location_url: Optional[str] = Field(
        None,
        alias="locationUrl",
        description="Map link for the location"
    )
    transit_detail: Optional[str] = Field(
        None,
        alias="transitDetail",
        description="Transit route summary"
    )
    transit_url: Optional[str] = Field(
        None,
        alias="transitUrl",
        description="Link to a transit guide"
    )

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def pad_time(cls, v):
        parsed = parse_hhmm(v)
        if parsed is None:
            return v
        return format_hhmm(*parsed)


class DayPlan(PlanModel):
    """Schedule for a single calendar day."""
    id: str = Field(..., description="Unique day identifier")
    date: datetime.date = Field(..., description="Calendar date of this day")
    items: list[ScheduleItem] = Field(
        default_factory=list,
        description="Activities, sorted by start time"
    )

    @field_validator("items")
    @classmethod
    def sort_items(cls, v: list[ScheduleItem]) -> list[ScheduleItem]:
        # stable, so equal start times keep document order
        return sorted(v, key=lambda item: item.start_time)


class ShoppingItem(PlanModel):
    """An entry on the packing/shopping list."""
    id: str = Field(..., description="Unique item identifier")
    name: str = Field(..., description="What to pack or buy")
    category: ShoppingCategory = Field(default=ShoppingCategory.OTHER)
    completed: bool = Field(default=False)
    price_twd: Optional[str] = Field(None, alias="priceTWD", description="Price in TWD")
    price_local: Optional[str] = Field(None, alias="priceLocal", description="Price in local currency")
    local_currency: Optional[str] = Field(None, alias="localCurrency", description="ISO currency code")
    coupon_name: Optional[str] = Field(None, alias="couponName")
    coupon_url: Optional[str] = Field(None, alias="couponUrl")


class TripBasicInfo(PlanModel):
    """Trip setup request: where and when."""
    destination: str
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")


class TravelPlan(PlanModel):
    """Complete trip document."""
    id: str = Field(..., description="Unique plan identifier")
    destination: str = Field(..., description="Destination name")
    start_date: date = Field(..., alias="startDate", description="First day (inclusive)")
    end_date: date = Field(..., alias="endDate", description="Last day (inclusive)")
    days: list[DayPlan] = Field(
        default_factory=list,
        description="One entry per calendar day, chronological"
    )
    shopping_list: list[ShoppingItem] = Field(
        default_factory=list,
        alias="shoppingList",
        description="Packing and shopping items"
    )

    @model_validator(mode="after")
    def check_days_cover_range(self) -> "TravelPlan":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        expected = (self.end_date - self.start_date).days + 1
        if len(self.days) != expected:
            raise ValueError(f"expected {expected} days, got {len(self.days)}")
        for offset, day in enumerate(self.days):
            if day.date != self.start_date + timedelta(days=offset):
                raise ValueError(f"day {offset + 1} has date {day.date.isoformat()}, dates must be consecutive")
        return self

    def get_day(self, day_id: str) -> Optional[DayPlan]:
        """Get a day by ID."""
        return next((day for day in self.days if day.id == day_id), None)

    def to_document(self) -> dict:
        """Convert to the persisted JSON shape (camelCase, absent fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
