from datetime import date, datetime

import pytest

from energycoach.pantry import (
    FULL, LOW, OUT, PANTRY_KEY, Pantry, PantryItem, available_tags, clear_bought, cycle_status,
    default_pantry, format_shopping_list, shopping_list, toggle_item, update_item,
)
from energycoach.timeutil import APP_TZ

AT = datetime(2025, 6, 10, 9, 0, tzinfo=APP_TZ)


def _items():
    return [
        PantryItem("salmon", "Salmon", "protein", FULL, "adds-salmon", AT),
        PantryItem("tuna", "Tuna", "protein", OUT, "adds-tuna", AT),
        PantryItem("oats", "Rolled oats", "pantry", LOW, None, AT),
    ]


class TestStatusCycle:
    def test_three_steps_return_to_start(self) -> None:
        for start in (FULL, LOW, OUT):
            s = start
            for _ in range(3):
                s = cycle_status(s)
            assert s == start

    def test_order(self) -> None:
        assert cycle_status(FULL) == LOW
        assert cycle_status(LOW) == OUT
        assert cycle_status(OUT) == FULL


class TestItems:
    def test_update_item(self) -> None:
        items = update_item(_items(), "salmon", LOW, at=AT)
        assert items[0].status == LOW
        assert items[1].status == OUT

    def test_update_rejects_unknown_status(self) -> None:
        with pytest.raises(ValueError):
            update_item(_items(), "salmon", "gone")

    def test_toggle_unknown_id_is_a_no_op(self) -> None:
        items = _items()
        assert toggle_item(items, "nope") is items

    def test_available_tags_skip_out(self) -> None:
        assert available_tags(_items()) == {"adds-salmon"}

    def test_shopping_list(self) -> None:
        assert [i.id for i in shopping_list(_items())] == ["tuna", "oats"]
        text = format_shopping_list(_items(), day=date(2025, 6, 10))
        assert text == "Shopping List — 2025-06-10\n\n[ ] Tuna\n[~] Rolled oats"

    def test_stocked_pantry_message(self) -> None:
        assert format_shopping_list(default_pantry(AT)) == "Nothing needed — pantry is stocked!"

    def test_clear_bought(self) -> None:
        items = clear_bought(_items(), at=AT)
        assert [i.status for i in items] == [FULL, FULL, LOW]


class TestPantryStore:
    def test_defaults_then_persisted(self, store) -> None:
        pantry = Pantry(store)
        assert "adds-chicken" in pantry.available_tags()

        pantry.toggle("chicken")
        pantry.toggle("chicken")
        assert "adds-chicken" not in pantry.available_tags()

        reloaded = Pantry(store)
        assert [i.status for i in reloaded.items if i.id == "chicken"] == [OUT]
        assert isinstance(store.get(PANTRY_KEY), list)

    def test_unreadable_store_uses_defaults(self, store) -> None:
        store.set(PANTRY_KEY, [{"name": "missing id"}])
        assert len(Pantry(store).items) == len(default_pantry())
