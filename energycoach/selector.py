# energycoach/selector.py
"""
Deterministic content picking.

Meals are keyed by (category, day) through a base-31 rolling hash so the
same day always yields the same recipe, on any platform, however often the
auto-fill runs. The manual re-roll is the only time-varying pick.
"""

import time
from datetime import date
from typing import Iterable, Optional, Sequence, TypeVar

from .content.exercise import Plan
from .content.recipes import Recipe, required_tags

T = TypeVar("T")

HASH_MODULUS = 2 ** 32


def polynomial_hash(text: str) -> int:
    h = 0
    for c in text:
        h = (h * 31 + ord(c)) % HASH_MODULUS
    return h


def filter_available(pool: Sequence[T], available_tags: Optional[Iterable[str]]) -> Sequence[T]:
    """
    Keep items that need nothing, or whose needed tag is available.
    Never returns an empty pool: if the filter removes everything, the
    full pool comes back.
    """
    if available_tags is None:
        return pool
    available = set(available_tags)
    filtered = [
        item for item in pool
        if not required_tags(item) or any(t in available for t in required_tags(item))
    ]
    return filtered or pool


def select_deterministic(category: str, day: date, pool: Sequence[T],
                         available_tags: Optional[Iterable[str]] = None) -> T:
    if not pool:
        raise ValueError(f"Empty pool for {category!r}")
    candidates = filter_available(pool, available_tags)
    index = polynomial_hash(f"{category}:{day.isoformat()}") % len(candidates)
    return candidates[index]


def select_pseudo_random(pool: Sequence[T], now_seconds: Optional[float] = None) -> T:
    """Re-roll pick; changes every second, not reproducible."""
    if not pool:
        raise ValueError("Empty pool")
    if now_seconds is None:
        now_seconds = time.time()
    return pool[int(now_seconds % len(pool))]


def format_recipe_note(r: Recipe) -> str:
    head = f"{r.title} — {r.summary}"
    ingredients = f"Ingredients: {', '.join(r.ingredients)}"
    steps = " ".join(f"{i}. {s}" for i, s in enumerate(r.steps, start=1))
    return f"{head}\n{ingredients}\nSteps: {steps}"


def format_plan_note(p: Plan) -> str:
    lines = [f"• {b.label} — {b.minutes}m ({b.details})" for b in p.blocks]
    return "\n".join([p.title] + lines)


def render(item) -> str:
    if isinstance(item, Recipe):
        return format_recipe_note(item)
    if isinstance(item, Plan):
        return format_plan_note(item)
    raise TypeError(f"Don't know how to render {type(item).__name__}")
