# energycoach/content/quotes.py

import random
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Quote:
    text: str
    author: str


QUOTES: Dict[str, List[Quote]] = {
    "bruce": [
        Quote("Be water, my friend.", "Bruce Lee"),
        Quote("The successful warrior is the average man, with laser-like focus.", "Bruce Lee"),
        Quote("Absorb what is useful, discard what is not, add what is uniquely your own.", "Bruce Lee"),
        Quote("Knowing is not enough, we must apply. Willing is not enough, we must do.", "Bruce Lee"),
    ],
    "alan": [
        Quote("Muddy water is best cleared by leaving it alone.", "Alan Watts"),
        Quote("You are an aperture through which the universe is looking at and exploring itself.",
              "Alan Watts"),
        Quote("Stop measuring days by degree of productivity and start experiencing them "
              "by degree of presence.", "Alan Watts"),
        Quote("Trying to define yourself is like trying to bite your own teeth.", "Alan Watts"),
    ],
}


def quote_pool(pref: str = "both") -> List[Quote]:
    if pref in QUOTES:
        return QUOTES[pref]
    return QUOTES["bruce"] + QUOTES["alan"]


def pick_quote(pref: str = "both", rng: Optional[random.Random] = None) -> Quote:
    return (rng or random).choice(quote_pool(pref))


def format_quote(quote: Quote) -> str:
    return f"{quote.text} — {quote.author}"
