from datetime import date, timedelta

from energycoach.agenda import (
    Slot, agenda_from_dict, agenda_to_dict, autofill, check_in, edit_slot_note, edit_slot_time,
    empty_agenda, missing_notes, needs_autofill, ordered_slots,
)
from energycoach.content.quotes import Quote
from energycoach.providers import LibraryContent
from energycoach.selector import render, select_deterministic
from energycoach.timeutil import clock_time


def _times(agenda):
    return {s.value: clock_time(agenda.at(s)) if agenda.at(s) else None for s in Slot}


class TestCheckIn:
    def test_cascade_scenario(self, anchor, settings) -> None:
        agenda = check_in(anchor, settings)
        assert agenda.anchor == anchor
        assert agenda.day_key == date(2025, 6, 10)
        assert _times(agenda) == {
            "breakfast": "08:00", "lunch": "12:00", "dinner": "16:00", "exercise": "17:00",
        }

    def test_keeps_quote(self, anchor, settings) -> None:
        q = Quote("Be water, my friend.", "Bruce Lee")
        assert check_in(anchor, settings, q).quote == q


class TestEditSlotTime:
    def test_breakfast_cascades_to_later_meals_only(self, anchor, settings) -> None:
        agenda = check_in(anchor, settings)
        edited = edit_slot_time(agenda, Slot.BREAKFAST, "09:00", True, settings)
        assert _times(edited) == {
            "breakfast": "09:00", "lunch": "13:00", "dinner": "17:00", "exercise": "17:00",
        }

    def test_lunch_without_cascade(self, anchor, settings) -> None:
        agenda = check_in(anchor, settings)
        edited = edit_slot_time(agenda, Slot.LUNCH, "13:30", False, settings)
        assert _times(edited) == {
            "breakfast": "08:00", "lunch": "13:30", "dinner": "16:00", "exercise": "17:00",
        }

    def test_lunch_with_cascade_moves_dinner(self, anchor, settings) -> None:
        agenda = check_in(anchor, settings)
        edited = edit_slot_time(agenda, Slot.LUNCH, "13:30", True, settings)
        assert clock_time(edited.at(Slot.DINNER)) == "17:30"
        assert clock_time(edited.at(Slot.BREAKFAST)) == "08:00"

    def test_dinner_and_exercise_never_cascade(self, anchor, settings) -> None:
        agenda = check_in(anchor, settings)
        edited = edit_slot_time(agenda, Slot.DINNER, "18:00", True, settings)
        edited = edit_slot_time(edited, Slot.EXERCISE, "06:15", True, settings)
        assert _times(edited) == {
            "breakfast": "08:00", "lunch": "12:00", "dinner": "18:00", "exercise": "06:15",
        }

    def test_before_check_in_is_a_no_op(self, settings) -> None:
        agenda = empty_agenda(date(2025, 6, 10))
        assert edit_slot_time(agenda, Slot.LUNCH, "12:00", True, settings) is agenda

    def test_notes_survive_time_edits(self, anchor, settings) -> None:
        agenda = edit_slot_note(check_in(anchor, settings), Slot.LUNCH, "soup")
        edited = edit_slot_time(agenda, Slot.BREAKFAST, "09:00", True, settings)
        assert edited.note(Slot.LUNCH) == "soup"


class TestOrderedSlots:
    def test_time_order_and_skips_empty(self, anchor, settings) -> None:
        agenda = check_in(anchor, settings)
        agenda = edit_slot_time(agenda, Slot.EXERCISE, "07:30", False, settings)
        assert [s for s, _ in ordered_slots(agenda)] == [
            Slot.EXERCISE, Slot.BREAKFAST, Slot.LUNCH, Slot.DINNER,
        ]
        assert ordered_slots(empty_agenda(date(2025, 6, 10))) == []

    def test_ties_keep_slot_order(self, anchor, settings) -> None:
        agenda = check_in(anchor, settings)
        agenda = edit_slot_time(agenda, Slot.EXERCISE, "16:00", False, settings)
        assert [s for s, _ in ordered_slots(agenda)][-2:] == [Slot.DINNER, Slot.EXERCISE]


class TestAutofill:
    def test_fills_every_note_with_day_picks(self, anchor, settings) -> None:
        content = LibraryContent()
        agenda = autofill(check_in(anchor, settings), content)
        day = agenda.day_key
        for slot in (Slot.BREAKFAST, Slot.LUNCH, Slot.DINNER):
            pick = select_deterministic(slot.value, day, content.recipes_for(slot.value))
            assert agenda.note(slot) == render(pick)
        assert agenda.note(Slot.EXERCISE) == render(content.plan_for_day(day))
        assert not needs_autofill(agenda)

    def test_keeps_existing_notes(self, anchor, settings) -> None:
        agenda = edit_slot_note(check_in(anchor, settings), Slot.DINNER, "leftovers")
        assert missing_notes(agenda) == [Slot.BREAKFAST, Slot.LUNCH, Slot.EXERCISE]
        filled = autofill(agenda, LibraryContent())
        assert filled.note(Slot.DINNER) == "leftovers"

    def test_idempotent(self, anchor, settings) -> None:
        once = autofill(check_in(anchor, settings), LibraryContent())
        assert autofill(once, LibraryContent()) is once

    def test_nothing_before_check_in(self) -> None:
        agenda = empty_agenda(date(2025, 6, 10))
        assert not needs_autofill(agenda)
        assert autofill(agenda, LibraryContent()) is agenda


class TestPersistence:
    def test_dict_shape_restores(self, anchor, settings) -> None:
        agenda = autofill(check_in(anchor, settings, Quote("q", "a")), LibraryContent())
        restored = agenda_from_dict(agenda_to_dict(agenda))
        assert restored == agenda

    def test_unreadable_becomes_empty(self) -> None:
        day = date(2025, 6, 10)
        assert agenda_from_dict({"day_key": "garbage"}, fallback_day=day) == empty_agenda(day)
        assert agenda_from_dict(None, fallback_day=day) == empty_agenda(day)

    def test_stored_times_are_aware(self, anchor, settings) -> None:
        raw = agenda_to_dict(check_in(anchor, settings))
        restored = agenda_from_dict(raw)
        assert restored.at(Slot.LUNCH) - restored.anchor == timedelta(hours=5)
