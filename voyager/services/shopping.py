"""
Shopping list manager - Packing and shopping entries for a trip.
"""
import logging
from typing import Any, Callable, Mapping, Optional

from ..config import settings
from ..models.plan import ShoppingCategory, ShoppingFilter, ShoppingItem, TravelPlan
from .planner import new_id

logger = logging.getLogger(__name__)

_OPTIONAL_FIELDS = {
    "price_twd": "priceTWD",
    "price_local": "priceLocal",
    "coupon_name": "couponName",
    "coupon_url": "couponUrl",
}


def _clean(value: Any) -> Optional[str]:
    """Trim a form value; blank values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _field(fields: Mapping[str, Any], name: str, alias: str) -> Any:
    return fields.get(name, fields.get(alias))


def add_shopping_item(
    items: list[ShoppingItem],
    fields: Mapping[str, Any],
    default_currency: Optional[str] = None
) -> list[ShoppingItem]:
    """
    Add an entry to the list.

    A blank name leaves the list unchanged. Optional price and coupon
    fields are only kept when they are non-empty after trimming, and a
    local currency is only recorded alongside a local price.
    """
    name = _clean(fields.get("name"))
    if name is None:
        return items

    data = {
        "id": new_id(),
        "name": name,
        "category": fields.get("category") or ShoppingCategory.OTHER,
        "completed": False,
    }
    for attr, alias in _OPTIONAL_FIELDS.items():
        value = _clean(_field(fields, attr, alias))
        if value is not None:
            data[attr] = value

    if "price_local" in data:
        currency = _clean(_field(fields, "local_currency", "localCurrency"))
        data["local_currency"] = (currency or default_currency or settings.default_local_currency).upper()

    item = ShoppingItem.model_validate(data)
    logger.debug(f"Added shopping item {item.id}: {item.name}")
    return [*items, item]


def toggle_complete(items: list[ShoppingItem], item_id: str) -> list[ShoppingItem]:
    """Flip the completed flag of one entry; unknown ids are ignored."""
    if not any(item.id == item_id for item in items):
        return items
    return [
        item.model_copy(update={"completed": not item.completed}) if item.id == item_id else item
        for item in items
    ]


def delete_shopping_item(items: list[ShoppingItem], item_id: str) -> list[ShoppingItem]:
    """Remove an entry; unknown ids are ignored."""
    if not any(item.id == item_id for item in items):
        return items
    return [item for item in items if item.id != item_id]


def filter_by_status(items: list[ShoppingItem], status: ShoppingFilter) -> list[ShoppingItem]:
    """Return the entries matching a status filter, in list order."""
    status = ShoppingFilter(status)
    if status == ShoppingFilter.COMPLETED:
        return [item for item in items if item.completed]
    if status == ShoppingFilter.PENDING:
        return [item for item in items if not item.completed]
    return list(items)


def update_shopping_list(
    plan: TravelPlan,
    change: Callable[..., list[ShoppingItem]],
    *args,
    **kwargs
) -> TravelPlan:
    """Apply a list operation to the plan's shopping list."""
    updated = change(plan.shopping_list, *args, **kwargs)
    if updated is plan.shopping_list:
        return plan
    return plan.model_copy(update={"shopping_list": updated})
