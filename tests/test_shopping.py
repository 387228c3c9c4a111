"""Tests for the shopping list manager."""
import pytest

from voyager.config import settings
from voyager.models.plan import ShoppingCategory, ShoppingFilter
from voyager.services.shopping import (
    add_shopping_item,
    delete_shopping_item,
    filter_by_status,
    toggle_complete,
    update_shopping_list,
)


def build_list(*names):
    items = []
    for name in names:
        items = add_shopping_item(items, {"name": name})
    return items


class TestAddShoppingItem:
    """Test adding entries."""

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_is_noop(self, name):
        items = build_list("Umbrella")

        assert add_shopping_item(items, {"name": name}) is items

    def test_defaults(self):
        items = add_shopping_item([], {"name": "  Sunscreen  "})

        item = items[0]
        assert item.name == "Sunscreen"
        assert item.category == ShoppingCategory.OTHER
        assert item.completed == False
        assert item.price_twd is None
        assert item.local_currency is None

    def test_category(self):
        items = add_shopping_item([], {"name": "Matcha", "category": "Food and Drinks"})

        assert items[0].category == ShoppingCategory.FOOD_AND_DRINKS

    def test_blank_optional_fields_dropped(self):
        """Empty strings are stored as absent, not as empty strings."""
        items = add_shopping_item([], {
            "name": "Camera",
            "price_twd": "  ",
            "price_local": "",
            "coupon_name": " ",
            "coupon_url": "",
        })

        item = items[0]
        assert item.price_twd is None
        assert item.price_local is None
        assert item.coupon_name is None
        assert item.coupon_url is None

    def test_prices_and_coupon(self):
        items = add_shopping_item([], {
            "name": "Camera",
            "priceTWD": " 12000 ",
            "priceLocal": "55000",
            "localCurrency": "jpy",
            "couponName": "Tax free 10%",
            "couponUrl": "https://coupon.example/cam",
        })

        item = items[0]
        assert item.price_twd == "12000"
        assert item.price_local == "55000"
        assert item.local_currency == "JPY"
        assert item.coupon_name == "Tax free 10%"
        assert item.coupon_url == "https://coupon.example/cam"

    def test_currency_defaults_with_local_price(self):
        items = add_shopping_item([], {"name": "Kimchi", "price_local": "8000"})

        assert items[0].local_currency == settings.default_local_currency

    def test_currency_override(self):
        items = add_shopping_item([], {"name": "Kimchi", "price_local": "8000"}, default_currency="KRW")

        assert items[0].local_currency == "KRW"

    def test_currency_needs_local_price(self):
        items = add_shopping_item([], {"name": "Socks", "local_currency": "USD"})

        assert items[0].local_currency is None

    def test_appends_in_order(self):
        items = build_list("A", "B", "C")

        assert [item.name for item in items] == ["A", "B", "C"]
        assert len({item.id for item in items}) == 3


class TestToggleAndDelete:
    """Test completion toggling and removal."""

    def test_toggle_twice_restores(self):
        items = build_list("Passport", "Adapter")
        target = items[1].id

        once = toggle_complete(items, target)
        twice = toggle_complete(once, target)

        assert once[1].completed == True
        assert once[0].completed == False
        assert twice == items

    def test_toggle_unknown_is_noop(self):
        items = build_list("Passport")

        assert toggle_complete(items, "missing") is items

    def test_delete(self):
        items = build_list("Passport", "Adapter")

        result = delete_shopping_item(items, items[0].id)

        assert [item.name for item in result] == ["Adapter"]
        assert len(items) == 2

    def test_delete_unknown_is_noop(self):
        items = build_list("Passport")

        assert delete_shopping_item(items, "missing") is items


class TestFilterByStatus:
    """Test the read-side status filter."""

    def _mixed_list(self):
        items = build_list("A", "B", "C", "D", "E")
        for index in (1, 3):
            items = toggle_complete(items, items[index].id)
        return items

    def test_all_returns_everything(self):
        items = self._mixed_list()

        assert filter_by_status(items, ShoppingFilter.ALL) == items

    def test_completed_and_pending(self):
        items = self._mixed_list()

        assert [i.name for i in filter_by_status(items, ShoppingFilter.COMPLETED)] == ["B", "D"]
        assert [i.name for i in filter_by_status(items, ShoppingFilter.PENDING)] == ["A", "C", "E"]

    def test_partition(self):
        """Completed and Pending are disjoint and together make All."""
        items = self._mixed_list()

        completed = {i.id for i in filter_by_status(items, ShoppingFilter.COMPLETED)}
        pending = {i.id for i in filter_by_status(items, ShoppingFilter.PENDING)}
        everything = {i.id for i in filter_by_status(items, ShoppingFilter.ALL)}

        assert completed.isdisjoint(pending)
        assert completed | pending == everything

    def test_accepts_string_status(self):
        items = self._mixed_list()

        assert len(filter_by_status(items, "Completed")) == 2

    def test_does_not_modify_list(self):
        items = self._mixed_list()
        snapshot = list(items)

        filter_by_status(items, ShoppingFilter.PENDING)

        assert items == snapshot


class TestPlanShoppingList:
    """Test applying list operations to a plan."""

    def test_update_plan_list(self, plan):
        updated = update_shopping_list(plan, add_shopping_item, {"name": "Yukata"})

        assert [item.name for item in updated.shopping_list] == ["Yukata"]
        assert plan.shopping_list == []

    def test_noop_returns_same_plan(self, plan):
        assert update_shopping_list(plan, add_shopping_item, {"name": ""}) is plan
