"""Data models for the trip planner."""
from .plan import (
    TravelPlan,
    DayPlan,
    ScheduleItem,
    ShoppingItem,
    ShoppingCategory,
    ShoppingFilter,
    GroundingLink,
    TripBasicInfo,
)
from .store import PlanStore, JsonFilePersistence, InMemoryPersistence, NoPlanLoadedError

__all__ = [
    "TravelPlan",
    "DayPlan",
    "ScheduleItem",
    "ShoppingItem",
    "ShoppingCategory",
    "ShoppingFilter",
    "GroundingLink",
    "TripBasicInfo",
    "PlanStore",
    "JsonFilePersistence",
    "InMemoryPersistence",
    "NoPlanLoadedError",
]
