# energycoach/pantry.py
"""
Pantry inventory.

Items cycle full → low → out → full. Anything not "out" that carries a
recipe tag makes that tag available to the recipe filter; anything low or
out lands on the shopping list.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Set

from .providers.base import TagProvider
from .timeutil import now as app_now
from .timeutil import today

logger = logging.getLogger(__name__)

PANTRY_KEY = "ec_pantry"

FULL = "full"
LOW = "low"
OUT = "out"
STATUSES = (FULL, LOW, OUT)
CATEGORIES = ("protein", "produce", "pantry", "dairy", "frozen", "drinks")

_NEXT_STATUS = {FULL: LOW, LOW: OUT, OUT: FULL}


@dataclass(frozen=True)
class PantryItem:
    id: str
    name: str
    category: str
    status: str = FULL
    recipe_tag: Optional[str] = None
    updated_at: Optional[datetime] = None


def cycle_status(current: str) -> str:
    """full → low → out → full"""
    return _NEXT_STATUS.get(current, FULL)


def update_item(items: List[PantryItem], item_id: str, status: str,
                at: Optional[datetime] = None) -> List[PantryItem]:
    if status not in STATUSES:
        raise ValueError(f"Unknown pantry status: {status!r}")
    at = at or app_now()
    return [replace(i, status=status, updated_at=at) if i.id == item_id else i for i in items]


def toggle_item(items: List[PantryItem], item_id: str) -> List[PantryItem]:
    for item in items:
        if item.id == item_id:
            return update_item(items, item_id, cycle_status(item.status))
    return items


def clear_bought(items: List[PantryItem], at: Optional[datetime] = None) -> List[PantryItem]:
    """Everything marked out is assumed bought and goes back to full."""
    at = at or app_now()
    return [replace(i, status=FULL, updated_at=at) if i.status == OUT else i for i in items]


def available_tags(items: List[PantryItem]) -> Set[str]:
    return {i.recipe_tag for i in items if i.status != OUT and i.recipe_tag}


def shopping_list(items: List[PantryItem]) -> List[PantryItem]:
    return [i for i in items if i.status in (LOW, OUT)]


def format_shopping_list(items: List[PantryItem], day: Optional[date] = None) -> str:
    needed = shopping_list(items)
    if not needed:
        return "Nothing needed — pantry is stocked!"
    lines = [("[ ] " if i.status == OUT else "[~] ") + i.name for i in needed]
    day = day or today()
    return f"Shopping List — {day.isoformat()}\n\n" + "\n".join(lines)


def default_pantry(at: Optional[datetime] = None) -> List[PantryItem]:
    at = at or app_now()

    def item(id, name, category, recipe_tag=None):
        return PantryItem(id, name, category, FULL, recipe_tag, at)

    return [
        # Proteins
        item("salmon-frozen", "Salmon (frozen)", "protein", "adds-salmon"),
        item("chicken", "Chicken", "protein", "adds-chicken"),
        item("tuna-low-sodium", "Tuna (low-sodium)", "protein", "adds-tuna"),
        item("turkey-cold-cuts", "Turkey cold cuts", "protein"),
        item("eggs", "Eggs", "protein", "adds-eggs"),
        # Produce
        item("blueberries", "Blueberries", "produce"),
        item("rainbow-peppers", "Rainbow / Bell peppers", "produce"),
        item("zucchini", "Zucchini", "produce"),
        item("cauliflower", "Cauliflower", "produce"),
        item("broccoli", "Broccoli", "produce"),
        item("tomato", "Tomato", "produce"),
        item("yellow-onion", "Yellow onion", "produce"),
        item("fresh-garlic", "Fresh garlic", "produce"),
        item("romaine-mix", "Romaine salad mix", "produce"),
        item("guacamole", "Guacamole", "produce"),
        item("fuji-apples", "Fuji apples", "produce"),
        # Pantry
        item("rolled-oats", "Rolled oats", "pantry"),
        item("walnuts", "Walnuts", "pantry"),
        item("manuka-honey", "Manuka honey", "pantry"),
        item("pasta-ww", "Pasta (whole wheat)", "pantry"),
        item("rice", "Rice", "pantry"),
        item("coconut-milk", "Coconut milk", "pantry"),
        item("bagels", "Bagels", "pantry"),
        item("ww-bread", "Whole wheat bread", "pantry"),
        item("buckwheat-waffle", "Buckwheat waffle mix", "pantry"),
        # Dairy
        item("cream-cheese", "Cream cheese / Vegan mayo", "dairy"),
        item("marble-cheese", "Marble cheese / Mozzarella", "dairy"),
        # Frozen
        item("hash-browns", "Hash browns (frozen)", "frozen"),
        item("frozen-pizza", "Frozen pizza", "frozen"),
        # Drinks
        item("coffee", "Coffee", "drinks"),
        item("green-tea", "Green tea", "drinks"),
        item("nettle-tea", "Nettle leaf tea", "drinks"),
        item("sparkling-water", "Sparkling mineral water", "drinks"),
    ]


def _item_to_dict(i: PantryItem) -> Dict[str, Any]:
    return {
        "id": i.id,
        "name": i.name,
        "category": i.category,
        "status": i.status,
        "recipe_tag": i.recipe_tag,
        "updated_at": i.updated_at.isoformat() if i.updated_at else None,
    }


def _item_from_dict(raw: Dict[str, Any]) -> PantryItem:
    status = raw.get("status", FULL)
    updated = raw.get("updated_at") or raw.get("updatedAt")
    return PantryItem(
        id=raw["id"],
        name=raw["name"],
        category=raw.get("category", "pantry"),
        status=status if status in STATUSES else FULL,
        recipe_tag=raw.get("recipe_tag") or raw.get("recipeTag"),
        updated_at=datetime.fromisoformat(updated) if updated else None,
    )


class Pantry(TagProvider):
    """Pantry items backed by the keyed store; also the recipe tag provider."""

    def __init__(self, store):
        self.store = store
        self.items = self._load()

    def _load(self) -> List[PantryItem]:
        raw = self.store.get(PANTRY_KEY)
        if not isinstance(raw, list):
            return default_pantry()
        try:
            return [_item_from_dict(r) for r in raw]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Stored pantry unreadable, using defaults: %s", e)
            return default_pantry()

    def save(self) -> bool:
        return self.store.set(PANTRY_KEY, [_item_to_dict(i) for i in self.items])

    def toggle(self, item_id: str) -> None:
        self.items = toggle_item(self.items, item_id)
        self.save()

    def clear_bought(self) -> None:
        self.items = clear_bought(self.items)
        self.save()

    def available_tags(self) -> Set[str]:
        return available_tags(self.items)

    def shopping_list_text(self) -> str:
        return format_shopping_list(self.items)
