"""Static content libraries: recipes, workout rotation, quotes."""

from .exercise import Block, Plan, plan_for_day
from .quotes import Quote, pick_quote
from .recipes import MEALS, Recipe, recipes_for

__all__ = [
    "Block",
    "MEALS",
    "Plan",
    "Quote",
    "Recipe",
    "pick_quote",
    "plan_for_day",
    "recipes_for",
]
