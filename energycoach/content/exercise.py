# energycoach/content/exercise.py

from dataclasses import dataclass
from datetime import date
from typing import List, Tuple


@dataclass(frozen=True)
class Block:
    label: str
    minutes: int
    details: str


@dataclass(frozen=True)
class Plan:
    title: str
    blocks: Tuple[Block, ...]


WARM_UP = Block("Qi Gong Warm-up", 10, "Ba Duan Jin style; gentle range")
COOL_DOWN = Block("Qi Gong Cool-down", 5, "Loose shakes, breath, open/close")

# 4-day rotation: energy, strength, balance, recovery
ROTATION: List[Plan] = [
    Plan("Mobility + Walk (Energy)", (
        WARM_UP,
        Block("Walk (easy pace)", 25, "RPE 3–4; nasal breathing"),
        Block("Hips/Shoulders Mobility", 10, "Cats-cows, hip circles, wall slides"),
        COOL_DOWN,
    )),
    Plan("Strength A (Low-Impact)", (
        WARM_UP,
        Block("Circuit ×2", 20, "Chair squats 8–12, Wall push-ups 8–12, Band rows 8–12, "
                               "Glute bridge 10–15, Dead bug 8–10/side"),
        Block("Walk (short)", 15, "Easy flush"),
        COOL_DOWN,
    )),
    Plan("Balance + Core", (
        WARM_UP,
        Block("Balance Drills", 12, "Single-leg (support nearby), heel-toe walks"),
        Block("Core (gentle)", 10, "Side plank (knees), bird-dog slow reps"),
        Block("Walk", 20, "Relaxed"),
        COOL_DOWN,
    )),
    Plan("Recovery + Longer Walk", (
        Block("Qi Gong Flow", 15, "Smooth continuous set"),
        Block("Walk (long easy)", 35, "Comfortable pace"),
        Block("Stretch", 8, "Calves, hamstrings, chest doorway stretch"),
    )),
]


def sunday_first_weekday(day: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (day.weekday() + 1) % 7


def plan_for_day(day: date) -> Plan:
    return ROTATION[sunday_first_weekday(day) % len(ROTATION)]
