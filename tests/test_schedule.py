"""Tests for the schedule normalizer and next-slot inference."""
import random
import pytest
from datetime import date

from pydantic import ValidationError

from voyager.models.plan import DayPlan, ScheduleItem
from voyager.services.schedule import (
    add_item,
    add_item_to_plan,
    delete_item,
    delete_item_from_plan,
    find_item,
    infer_next_slot,
    update_item,
    update_item_in_plan,
)


def make_item(item_id, start, end="", is_range=True, activity="Temple"):
    return ScheduleItem(
        id=item_id,
        start_time=start,
        end_time=end,
        is_range=is_range,
        activity=activity,
    )


def make_day(*items):
    return DayPlan(id="day-1", date=date(2026, 4, 1), items=list(items))


def start_times(day):
    return [item.start_time for item in day.items]


class TestInferNextSlot:
    """Test default times for new activities."""

    def test_empty_day(self):
        """Empty day starts at 09:00."""
        assert infer_next_slot(make_day()) == ("09:00", "10:00")

    def test_after_range(self):
        """Range item: one hour after its end time."""
        day = make_day(make_item("a", "14:00", "15:00", is_range=True))

        assert infer_next_slot(day) == ("16:00", "17:00")

    def test_after_single_time(self):
        """Non-range item: one hour after its start time, end time ignored."""
        day = make_day(make_item("a", "14:00", "18:00", is_range=False))

        assert infer_next_slot(day) == ("15:00", "16:00")

    def test_minutes_preserved(self):
        day = make_day(make_item("a", "10:45", is_range=False))

        assert infer_next_slot(day) == ("11:45", "12:45")

    def test_wraps_past_midnight(self):
        """Times wrap on a 24-hour clock."""
        day = make_day(make_item("a", "23:30", is_range=False))

        assert infer_next_slot(day) == ("00:30", "01:30")

    def test_end_wraps_past_midnight(self):
        day = make_day(make_item("a", "21:00", "22:15", is_range=True))

        assert infer_next_slot(day) == ("23:15", "00:15")

    def test_uses_last_item(self):
        """Reference is the last (latest) item."""
        day = make_day(
            make_item("a", "08:00", "20:00"),
            make_item("b", "12:00", "13:00"),
        )

        assert infer_next_slot(day) == ("14:00", "15:00")

    @pytest.mark.parametrize("reference", ["", "noon", "25:00", "12:60", "12-30", "1230"])
    def test_malformed_reference_falls_back(self, reference):
        """Unreadable reference time gives 12:00-13:00."""
        day = make_day(make_item("a", "08:00", reference, is_range=True))

        assert infer_next_slot(day) == ("12:00", "13:00")


class TestAddItem:
    """Test adding activities."""

    def test_add_to_empty_day(self):
        day = add_item(make_day())

        assert len(day.items) == 1
        item = day.items[0]
        assert item.start_time == "09:00"
        assert item.end_time == "10:00"
        assert item.is_range == True
        assert item.activity == "New Activity"
        assert item.content == ""

    def test_add_after_range(self):
        day = add_item(make_day(make_item("a", "14:00", "15:00")))

        assert start_times(day) == ["14:00", "16:00"]
        assert day.items[1].end_time == "17:00"

    def test_custom_activity(self):
        day = add_item(make_day(), "Kinkaku-ji")

        assert day.items[0].activity == "Kinkaku-ji"

    def test_wrapped_item_sorts_first(self):
        """An item wrapped past midnight lands at the start of the day."""
        day = add_item(make_day(make_item("a", "23:30", is_range=False)))

        assert start_times(day) == ["00:30", "23:30"]

    def test_input_not_modified(self):
        original = make_day(make_item("a", "10:00", "11:00"))

        add_item(original)

        assert len(original.items) == 1

    def test_fresh_ids(self):
        day = add_item(add_item(make_day()))

        assert day.items[0].id != day.items[1].id


class TestUpdateItem:
    """Test merging partial updates."""

    def test_update_resorts(self):
        day = make_day(make_item("a", "08:00"), make_item("b", "09:00"))

        day = update_item(day, "a", {"start_time": "11:00"})

        assert [item.id for item in day.items] == ["b", "a"]

    def test_equal_start_keeps_relative_order(self):
        """Sort is stable for equal start times."""
        day = make_day(make_item("a", "08:00"), make_item("b", "09:00"), make_item("c", "10:00"))

        day = update_item(day, "c", {"start_time": "08:00"})

        assert [item.id for item in day.items] == ["a", "c", "b"]

    def test_camel_case_keys(self):
        day = make_day(make_item("a", "08:00", "09:00"))

        day = update_item(day, "a", {"startTime": "07:00", "isRange": False, "locationUrl": "https://maps.example/a"})

        item = day.items[0]
        assert item.start_time == "07:00"
        assert item.is_range == False
        assert item.location_url == "https://maps.example/a"

    def test_toggle_range_keeps_end_time(self):
        """Switching off the range keeps end_time for later."""
        day = make_day(make_item("a", "08:00", "09:30"))

        day = update_item(day, "a", {"is_range": False})
        assert day.items[0].end_time == "09:30"

        day = update_item(day, "a", {"is_range": True})
        assert day.items[0].end_time == "09:30"

    def test_unknown_item_is_noop(self):
        day = make_day(make_item("a", "08:00"))

        assert update_item(day, "missing", {"activity": "x"}) is day

    def test_id_cannot_change(self):
        day = make_day(make_item("a", "08:00"))

        day = update_item(day, "a", {"id": "b", "activity": "Lunch"})

        assert day.items[0].id == "a"
        assert day.items[0].activity == "Lunch"

    def test_unknown_fields_ignored(self):
        day = make_day(make_item("a", "08:00"))

        day = update_item(day, "a", {"color": "red"})

        assert day.items[0] == make_item("a", "08:00")

    def test_times_zero_padded(self):
        """Single-digit hours are padded so string order stays chronological."""
        day = make_day(make_item("a", "10:00"))

        day = update_item(day, "a", {"start_time": "9:30"})

        assert day.items[0].start_time == "09:30"

    def test_end_before_start_allowed(self):
        """End time is not checked against start time."""
        day = make_day(make_item("a", "10:00", "11:00"))

        day = update_item(day, "a", {"end_time": "08:00"})

        assert day.items[0].end_time == "08:00"

    def test_invalid_type_rejected(self):
        day = make_day(make_item("a", "10:00"))

        with pytest.raises(ValidationError):
            update_item(day, "a", {"is_range": "sometimes"})


class TestDeleteItem:
    """Test removing activities."""

    def test_delete(self):
        day = make_day(make_item("a", "08:00"), make_item("b", "09:00"))

        day = delete_item(day, "a")

        assert [item.id for item in day.items] == ["b"]

    def test_delete_unknown_returns_equal_day(self):
        day = make_day(make_item("a", "08:00"))

        result = delete_item(day, "missing")

        assert result == day
        assert result == make_day(make_item("a", "08:00"))


class TestOrderingProperty:
    """Items stay sorted through random edit sequences."""

    @pytest.mark.parametrize("seed", range(20))
    def test_random_sequences_stay_sorted(self, seed):
        rng = random.Random(seed)
        day = make_day()

        for _ in range(40):
            op = rng.choice(["add", "add", "update", "update", "delete"])
            if op == "add" or not day.items:
                day = add_item(day)
            elif op == "update":
                target = rng.choice(day.items)
                new_time = f"{rng.randrange(24):02d}:{rng.randrange(60):02d}"
                field = rng.choice(["start_time", "end_time", "is_range"])
                value = rng.choice([True, False]) if field == "is_range" else new_time
                day = update_item(day, target.id, {field: value})
            else:
                day = delete_item(day, rng.choice(day.items).id)

            assert start_times(day) == sorted(start_times(day))


class TestPlanLevelOperations:
    """Test the day-locating wrappers."""

    def test_add_to_day(self, plan):
        day_id = plan.days[1].id

        updated = add_item_to_plan(plan, day_id, "Arashiyama")

        assert updated.days[1].items[0].activity == "Arashiyama"
        assert updated.days[0].items == []
        assert plan.days[1].items == []

    def test_unknown_day_is_noop(self, plan):
        assert add_item_to_plan(plan, "missing") is plan
        assert update_item_in_plan(plan, "missing", "x", {"activity": "y"}) is plan
        assert delete_item_from_plan(plan, "missing", "x") is plan

    def test_update_and_find(self, plan):
        day_id = plan.days[0].id
        plan = add_item_to_plan(plan, day_id)
        item_id = plan.days[0].items[0].id

        plan = update_item_in_plan(plan, day_id, item_id, {"activity": "Nishiki Market"})

        assert find_item(plan, day_id, item_id).activity == "Nishiki Market"
        assert find_item(plan, day_id, "missing") is None
        assert find_item(plan, "missing", item_id) is None

    def test_delete_from_plan(self, plan):
        day_id = plan.days[0].id
        plan = add_item_to_plan(plan, day_id)
        item_id = plan.days[0].items[0].id

        plan = delete_item_from_plan(plan, day_id, item_id)

        assert plan.days[0].items == []
