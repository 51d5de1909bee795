# energycoach/content/recipes.py

from dataclasses import dataclass, field
from typing import List, Tuple

MEALS = ("breakfast", "lunch", "dinner")

# Tags starting with this prefix name a pantry item the recipe needs,
# e.g. "adds-salmon" only makes sense while salmon is in stock.
REQUIRES_PREFIX = "adds-"


@dataclass(frozen=True)
class Recipe:
    id: str
    meal: str
    title: str
    summary: str
    ingredients: Tuple[str, ...]
    steps: Tuple[str, ...]
    tags: Tuple[str, ...] = field(default_factory=tuple)


def _r(id, meal, title, summary, ingredients, steps, tags=()):
    return Recipe(id, meal, title, summary, tuple(ingredients), tuple(steps), tuple(tags))


BREAKFAST = [
    _r("oatmeal-power-bowl", "breakfast", "Oatmeal Power Bowl",
       "Rolled oats with crushed walnuts, blueberries, and manuka honey.",
       ["rolled oats", "crushed walnuts", "blueberries", "manuka honey", "oat milk"],
       ["Simmer oats in oat milk 5 min.",
        "Top with walnuts and blueberries.",
        "Drizzle manuka honey to finish."],
       ["kidney-friendly", "anti-inflammatory", "vegetarian", "quick"]),
    _r("bagel-wow-butter", "breakfast", "Bagel + Wow Butter",
       "Toasted bagel with wow butter or cream cheese, Fuji apple on the side.",
       ["bagel", "wow butter or cream cheese", "Fuji apple"],
       ["Toast bagel.",
        "Spread wow butter or cream cheese.",
        "Serve with sliced Fuji apple on the side."],
       ["quick", "vegetarian"]),
    _r("buckwheat-waffles", "breakfast", "Buckwheat Waffles",
       "Buckwheat waffles with maple syrup, hash browns, and eggs.",
       ["buckwheat waffle mix", "maple syrup", "hash browns", "eggs"],
       ["Prepare waffle batter per package; cook in waffle iron.",
        "Pan-fry hash browns until crispy.",
        "Cook eggs as preferred.",
        "Serve together with maple syrup."],
       ["gluten-free-leaning", "coffee-morning", "adds-eggs", "weekend"]),
    _r("blueberry-pancakes", "breakfast", "Blueberry Pancakes",
       "Fluffy blueberry pancakes with maple syrup.",
       ["pancake mix", "blueberries", "maple syrup", "oat milk"],
       ["Mix batter; fold in blueberries.",
        "Cook on medium heat, flip when bubbles form.",
        "Serve with maple syrup."],
       ["vegetarian", "weekend", "anti-inflammatory"]),
    _r("eggs-hash-browns", "breakfast", "Eggs with Hash Browns",
       "Scrambled or fried eggs with crispy hash browns and optional garlic and peppers.",
       ["eggs", "hash browns", "fresh garlic (optional)", "rainbow peppers (optional)", "olive oil"],
       ["Pan-fry hash browns until golden and crispy.",
        "Sauté garlic and peppers if using.",
        "Cook eggs as preferred.",
        "Serve together."],
       ["protein", "savory", "adds-eggs", "kidney-friendly"]),
    _r("golden-morning-bowl", "breakfast", "Golden Morning Bowl",
       "Warm oats + banana with turmeric & cinnamon; creamy + crunchy.",
       ["rolled oats", "almond/oat milk", "banana", "turmeric", "cinnamon",
        "pumpkin seeds (small sprinkle)"],
       ["Simmer oats in milk 5–7 min.",
        "Mash in ½ banana; stir turmeric + pinch cinnamon.",
        "Top with thin banana slices + tiny sprinkle seeds for crunch."],
       ["kidney-friendly", "low-oxalate-leaning", "vegetarian"]),
    _r("crispy-morning-hash", "breakfast", "Crispy Morning Hash (Low-Oxalate)",
       "Potato + zucchini hash, crisp edges, soft middle.",
       ["potato (diced)", "zucchini (diced)", "olive oil", "garlic powder", "pepper"],
       ["Pan on medium-high; oil until shimmering.",
        "Add potato; leave 3–4 min before stirring.",
        "Add zucchini; season; cook to crisp edges."],
       ["kidney-friendly", "gluten-free"]),
    _r("basic-crepes-fruit", "breakfast", "Basic Crêpes + Fruit",
       "Thin crêpes with yogurt & berries/banana.",
       ["crêpe batter", "plain yogurt", "berries/banana", "maple (drizzle)"],
       ["Nonstick pan, thin layer batter; flip when edges lift.",
        "Fill with yogurt + fruit; fold; drizzle a touch of maple."],
       ["vegetarian"]),
    _r("breakfast-greens-rotation", "breakfast", "Breakfast Greens Sauté",
       "Quick sautéed greens + egg or tofu for protein.",
       ["greens (e.g., kale/chard)", "olive oil", "garlic", "egg or tofu"],
       ["Sauté greens 3–4 min.", "Add egg/tofu, cook through.", "Pepper; serve."],
       ["protein", "quick"]),
]

LUNCH = [
    _r("monster-turkey-sandwich", "lunch", "Monster Turkey Sandwich",
       "Whole wheat turkey sandwich with guacamole, romaine, and Fritos.",
       ["whole wheat bread", "turkey cold cuts", "romaine", "tomato", "guacamole",
        "vegan mayo", "caesar dressing", "sliced onion", "Fritos"],
       ["Layer turkey, romaine, tomato, and onion on bread.",
        "Spread guacamole and vegan mayo.",
        "Drizzle caesar dressing.",
        "Serve with Fritos on the side."],
       ["quick", "filling"]),
    _r("pasta-tuna-bowl", "lunch", "Pasta Tuna Bowl",
       "Whole wheat pasta with low-sodium tuna, broccoli, peas, and alfredo sauce.",
       ["whole wheat pasta", "low-sodium tuna", "broccoli", "green peas",
        "alfredo or cheez whiz sauce"],
       ["Cook pasta; reserve a little pasta water.",
        "Steam broccoli and peas.",
        "Drain tuna; combine all with sauce.",
        "Add pasta water to loosen if needed."],
       ["adds-tuna", "filling", "kidney-aware"]),
    _r("golden-cauliflower-curry", "lunch", "Golden Cauliflower Curry",
       "Turmeric coconut curry; mild, cozy.",
       ["cauliflower", "onion", "garlic", "turmeric", "coconut milk", "rice"],
       ["Sauté onion/garlic.", "Add cauliflower + turmeric.",
        "Pour coconut milk; simmer; serve over rice."],
       ["vegan"]),
    _r("sesame-tofu-fried-rice", "lunch", "Golden Grove Fried Rice (Sesame Tofu)",
       "Leftover rice + tofu; toasted sesame finish.",
       ["cooked rice", "firm tofu", "frozen peas/carrots", "sesame oil",
        "low-sodium tamari (light)"],
       ["Crisp tofu cubes.", "Add rice + veg; toss.",
        "Finish with a little sesame oil; tiny splash tamari."],
       ["kidney-aware", "low-sodium"]),
    _r("tuna-chickpea-smash", "lunch", "Tuna + Chickpea Smash (Low-Sodium)",
       "High-protein spread for wrap or romaine boats.",
       ["low-sodium tuna (rinsed)", "chickpeas (rinsed, mashed)", "olive oil", "lemon", "dill"],
       ["Mash chickpeas; fold in tuna.", "Olive oil + lemon + dill.", "Serve in wrap/lettuce."],
       ["adds-tuna", "quick"]),
    _r("veg-rice-soup", "lunch", "Vegetable & Rice Soup (One-Pot)",
       "Light, soothing; great make-ahead.",
       ["onion", "carrot", "celery", "rice", "water/low-sodium stock", "bay"],
       ["Sweat veg 5 min.", "Add rice + liquid + bay; simmer till tender.", "Pepper to finish."],
       ["gentle", "kidney-aware"]),
]

DINNER = [
    _r("jamaican-style-curry", "dinner", "Jamaican-Style Curry",
       "Chicken or chickpeas with zucchini, cauliflower, and coconut milk over rice.",
       ["chicken or chickpeas", "zucchini", "cauliflower", "celery", "carrots", "bell peppers",
        "coconut milk", "curry powder", "cumin", "ginger powder", "cayenne", "rice", "cilantro"],
       ["Sauté onion and peppers 3–4 min.",
        "Add spices; toast 1 min.",
        "Add chicken or chickpeas + vegetables; stir to coat.",
        "Pour coconut milk; simmer 20–25 min until tender.",
        "Serve over rice with fresh cilantro."],
       ["adds-chicken", "kidney-aware", "makes-two-meals", "anti-inflammatory"]),
    _r("rice-veggie-bowl", "dinner", "Rice Veggie Bowl",
       "Rice with cilantro, mixed vegetables, and chicken or chickpeas.",
       ["rice", "cilantro", "mixed vegetables", "chicken or chickpeas", "olive oil",
        "garlic powder", "pepper"],
       ["Cook rice; fluff with cilantro.",
        "Season and cook chicken or chickpeas until done.",
        "Sauté mixed vegetables.",
        "Assemble bowl; serve."],
       ["adds-chicken", "gentle", "kidney-aware", "makes-two-meals"]),
    _r("pasta-chicken-bowl", "dinner", "Pasta Chicken Bowl",
       "Pasta with chicken, broccoli, green peas, and alfredo sauce.",
       ["pasta", "chicken", "broccoli", "green peas", "alfredo sauce"],
       ["Cook pasta.",
        "Season and cook chicken; slice.",
        "Steam broccoli and peas.",
        "Combine all with alfredo sauce."],
       ["adds-chicken", "filling"]),
    _r("chicken-caesar-twist", "dinner", "Chicken Caesar (Twist)",
       "Grilled/air-fried chicken; light dressing.",
       ["chicken breast", "romaine", "olive oil", "lemon", "parmesan (pinch)"],
       ["Cook chicken; slice.", "Toss romaine with oil + lemon.",
        "Top with chicken + tiny parmesan."],
       ["adds-chicken", "light"]),
    _r("baked-salmon-sheetpan", "dinner", "Baked Salmon Sheet-Pan",
       "Lemon-herb salmon + veggies.",
       ["salmon", "zucchini", "bell pepper", "olive oil", "lemon", "herbs"],
       ["Tray with veg; oil + season.", "Lay salmon on top; 200°C / 400°F ~12–15 min.",
        "Finish with lemon."],
       ["adds-salmon"]),
    _r("golden-cauliflower-curry-dinner", "dinner", "Golden Cauliflower Curry (Dinner)",
       "Double up for leftover-friendly dinner.",
       ["cauliflower", "onion", "garlic", "turmeric", "coconut milk", "rice"],
       ["Same method as lunch version; larger batch."],
       ["vegan"]),
]

RECIPES: List[Recipe] = BREAKFAST + LUNCH + DINNER


def recipes_for(meal: str) -> List[Recipe]:
    if meal not in MEALS:
        raise ValueError(f"Unknown meal: {meal!r}")
    return [r for r in RECIPES if r.meal == meal]


def required_tags(recipe: Recipe) -> List[str]:
    return [t for t in recipe.tags if t.startswith(REQUIRES_PREFIX)]
