"""
API Routes for the trip planner.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing import Any, Optional

from ..models.plan import ShoppingCategory, ShoppingFilter, TravelPlan, TripBasicInfo
from ..models.store import NoPlanLoadedError, PlanStore
from ..services.lookup import LookupKind, LookupTracker
from ..services.planner import PlanError, create_plan, rename_destination
from ..services.schedule import add_item_to_plan, delete_item_from_plan, update_item_in_plan
from ..services.shopping import (
    add_shopping_item,
    delete_shopping_item,
    filter_by_status,
    toggle_complete,
    update_shopping_list,
)
from ..services.transfer import PlanImportError, export_filename, export_plan


router = APIRouter(prefix="/api", tags=["trip-planner"])


# Request/Response Models
class DestinationRequest(BaseModel):
    destination: str


class AddItemRequest(BaseModel):
    activity: Optional[str] = None


class ShoppingItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    category: ShoppingCategory = ShoppingCategory.OTHER
    price_twd: Optional[str] = Field(None, alias="priceTWD")
    price_local: Optional[str] = Field(None, alias="priceLocal")
    local_currency: Optional[str] = Field(None, alias="localCurrency")
    coupon_name: Optional[str] = Field(None, alias="couponName")
    coupon_url: Optional[str] = Field(None, alias="couponUrl")


class PlanResponse(BaseModel):
    plan: dict
    last_saved: Optional[str] = None


class LookupResponse(BaseModel):
    found: bool
    plan: dict


# Dependencies

def get_store(request: Request) -> PlanStore:
    return request.app.state.store


def get_tracker(request: Request) -> LookupTracker:
    return request.app.state.lookup_tracker


def _plan_response(store: PlanStore, plan: TravelPlan) -> PlanResponse:
    return PlanResponse(
        plan=plan.to_document(),
        last_saved=store.last_saved.isoformat() if store.last_saved else None
    )


def _apply(store: PlanStore, transform, *args) -> TravelPlan:
    """Run a transformation on the current plan, mapping errors to HTTP codes."""
    try:
        return store.apply(transform, *args)
    except NoPlanLoadedError:
        raise HTTPException(status_code=404, detail="No plan loaded")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid field values: {e}")


# Endpoints

@router.post("/plan", response_model=PlanResponse)
async def setup_trip(info: TripBasicInfo, store: PlanStore = Depends(get_store)):
    """Create a new trip, replacing the current one."""
    try:
        plan = create_plan(info.destination, info.start_date, info.end_date)
    except PlanError as e:
        raise HTTPException(status_code=400, detail=str(e))
    store.replace(plan)
    return _plan_response(store, plan)


@router.get("/plan", response_model=PlanResponse)
async def get_plan(store: PlanStore = Depends(get_store)):
    """Get the current trip."""
    if store.plan is None:
        raise HTTPException(status_code=404, detail="No plan loaded")
    return _plan_response(store, store.plan)


@router.put("/plan/destination", response_model=PlanResponse)
async def update_destination(request: DestinationRequest, store: PlanStore = Depends(get_store)):
    """Rename the trip destination; blank names are ignored."""
    plan = _apply(store, rename_destination, request.destination)
    return _plan_response(store, plan)


@router.post("/days/{day_id}/items", response_model=PlanResponse)
async def add_schedule_item(
    day_id: str,
    request: Optional[AddItemRequest] = None,
    store: PlanStore = Depends(get_store)
):
    """Add an activity in the next free slot of a day."""
    activity = request.activity if request else None
    plan = _apply(store, add_item_to_plan, day_id, activity)
    return _plan_response(store, plan)


@router.patch("/days/{day_id}/items/{item_id}", response_model=PlanResponse)
async def update_schedule_item(
    day_id: str,
    item_id: str,
    updates: dict[str, Any],
    store: PlanStore = Depends(get_store)
):
    """Update fields of an activity."""
    plan = _apply(store, update_item_in_plan, day_id, item_id, updates)
    return _plan_response(store, plan)


@router.delete("/days/{day_id}/items/{item_id}", response_model=PlanResponse)
async def delete_schedule_item(day_id: str, item_id: str, store: PlanStore = Depends(get_store)):
    """Remove an activity."""
    plan = _apply(store, delete_item_from_plan, day_id, item_id)
    return _plan_response(store, plan)


@router.post("/days/{day_id}/items/{item_id}/lookup/{kind}", response_model=LookupResponse)
async def lookup_item(
    day_id: str,
    item_id: str,
    kind: LookupKind,
    store: PlanStore = Depends(get_store),
    tracker: LookupTracker = Depends(get_tracker)
):
    """Resolve the location or transit route of an activity."""
    try:
        found = await tracker.run(store, day_id, item_id, kind)
    except NoPlanLoadedError:
        raise HTTPException(status_code=404, detail="No plan loaded")
    return LookupResponse(found=found, plan=store.require_plan().to_document())


@router.delete("/items/{item_id}/lookup")
async def cancel_lookup(
    item_id: str,
    kind: Optional[LookupKind] = None,
    tracker: LookupTracker = Depends(get_tracker)
):
    """Cancel running lookups for an activity."""
    return {"cancelled": tracker.cancel(item_id, kind)}


@router.get("/lookups")
async def get_lookups(tracker: LookupTracker = Depends(get_tracker)):
    """List activities with a lookup in flight."""
    return {kind.value: tracker.in_flight(kind) for kind in LookupKind}


@router.get("/shopping")
async def get_shopping_list(
    status: ShoppingFilter = ShoppingFilter.ALL,
    store: PlanStore = Depends(get_store)
):
    """List shopping entries, optionally filtered by status."""
    if store.plan is None:
        raise HTTPException(status_code=404, detail="No plan loaded")
    items = filter_by_status(store.plan.shopping_list, status)
    return {
        "status": status.value,
        "items": [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]
    }


@router.post("/shopping", response_model=PlanResponse)
async def add_shopping_entry(request: ShoppingItemRequest, store: PlanStore = Depends(get_store)):
    """Add a shopping entry; blank names are ignored."""
    plan = _apply(store, update_shopping_list, add_shopping_item, request.model_dump())
    return _plan_response(store, plan)


@router.post("/shopping/{item_id}/toggle", response_model=PlanResponse)
async def toggle_shopping_entry(item_id: str, store: PlanStore = Depends(get_store)):
    """Mark a shopping entry done or not done."""
    plan = _apply(store, update_shopping_list, toggle_complete, item_id)
    return _plan_response(store, plan)


@router.delete("/shopping/{item_id}", response_model=PlanResponse)
async def delete_shopping_entry(item_id: str, store: PlanStore = Depends(get_store)):
    """Remove a shopping entry."""
    plan = _apply(store, update_shopping_list, delete_shopping_item, item_id)
    return _plan_response(store, plan)


@router.get("/export")
async def export_current_plan(store: PlanStore = Depends(get_store)):
    """Download the current trip as a JSON file."""
    if store.plan is None:
        raise HTTPException(status_code=404, detail="No plan loaded")
    return Response(
        content=export_plan(store.plan),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(store.plan)}"'}
    )


@router.post("/import", response_model=PlanResponse)
async def import_trip(request: Request, store: PlanStore = Depends(get_store)):
    """Replace the current trip with an exported JSON document."""
    body = await request.body()
    try:
        plan = store.import_document(body)
    except PlanImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _plan_response(store, plan)
