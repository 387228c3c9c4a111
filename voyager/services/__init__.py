"""Services for the trip planner."""
from .planner import create_plan, InvalidRangeError, InvalidDestinationError
from .schedule import infer_next_slot, add_item, update_item, delete_item
from .shopping import add_shopping_item, toggle_complete, filter_by_status
from .transfer import export_plan, import_plan, PlanImportError
from .lookup import LookupService, LookupTracker

__all__ = [
    "create_plan",
    "InvalidRangeError",
    "InvalidDestinationError",
    "infer_next_slot",
    "add_item",
    "update_item",
    "delete_item",
    "add_shopping_item",
    "toggle_complete",
    "filter_by_status",
    "export_plan",
    "import_plan",
    "PlanImportError",
    "LookupService",
    "LookupTracker",
]
