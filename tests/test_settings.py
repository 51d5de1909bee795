import json

import pytest

from energycoach.settings import (
    DEFAULT_SETTINGS, CustomExercise, EveningExercise, MorningExercise, NotifyToggles,
    config_path, exercise_plan, load_config, settings_from_dict, settings_to_dict,
)


class TestExercisePlan:
    def test_modes(self) -> None:
        assert exercise_plan("morning") == MorningExercise()
        assert exercise_plan("evening", 90) == EveningExercise(offset_minutes=90)
        assert exercise_plan("custom") == CustomExercise()

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            exercise_plan("noon")


class TestSettingsFromDict:
    def test_camel_case_shape(self) -> None:
        s = settings_from_dict({
            "breakfastOffsetMins": 30,
            "mealIntervalHours": 5,
            "exerciseDefault": "evening",
            "exerciseOffsetMins": 45,
            "quotePref": "alan",
            "notify": {"meals": True, "exercise": False, "quotes": True, "sound": False},
            "bookingUrl": "https://example.com/book",
        })
        assert s.breakfast_offset_minutes == 30
        assert s.meal_interval_hours == 5
        assert s.exercise == EveningExercise(offset_minutes=45)
        assert s.quote_pref == "alan"
        assert s.notify == NotifyToggles(exercise=False, sound=False)
        assert s.booking_url == "https://example.com/book"

    def test_invalid_values_fall_back(self) -> None:
        s = settings_from_dict({
            "breakfastOffsetMins": "soon",
            "mealIntervalHours": -2,
            "exerciseDefault": "noon",
            "quotePref": "yoda",
        })
        assert s == DEFAULT_SETTINGS

    def test_not_a_dict(self) -> None:
        assert settings_from_dict(None) is DEFAULT_SETTINGS
        assert settings_from_dict(["x"]) is DEFAULT_SETTINGS

    def test_offset_without_mode_keeps_evening(self) -> None:
        assert settings_from_dict({"exercise_offset_minutes": 20}).exercise == EveningExercise(20)

    def test_to_dict_and_back(self) -> None:
        s = DEFAULT_SETTINGS.with_exercise("morning")
        assert settings_from_dict(settings_to_dict(s)) == s


class TestConfigFile:
    def test_missing_file_keeps_base(self, tmp_path) -> None:
        assert load_config(tmp_path / "nope.json") is DEFAULT_SETTINGS

    def test_broken_file_keeps_base(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(path) is DEFAULT_SETTINGS

    def test_overrides(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"mealIntervalHours": 3}), encoding="utf-8")
        assert load_config(path).meal_interval_hours == 3

    def test_env_path(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("ENERGYCOACH_CONFIG", str(tmp_path / "custom.json"))
        assert config_path(tmp_path) == tmp_path / "custom.json"
        monkeypatch.delenv("ENERGYCOACH_CONFIG")
        assert config_path(tmp_path) == tmp_path / "config.json"
