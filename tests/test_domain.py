import unittest

from pydantic import ValidationError

from picko.domain import (
    BASE_VOCABULARY,
    ClothingItem,
    ClothingStyle,
    CurrentConditions,
    DayForecast,
    DaySlot,
    StructuredRecommendation,
    UserPreferences,
    WeatherSnapshot,
    vocabulary_for,
)


def _snapshot():
    return WeatherSnapshot(
        location="Madison",
        current=CurrentConditions(
            temp=50, feels_like=48, description="Clear", weather_code=0, wind_speed=5, humidity=40
        ),
        today=DayForecast(high=55, low=40),
        tomorrow=DayForecast(high=38, low=28, description="Light Snow", weather_code=71, precipitation_chance=70),
    )


class TestVocabulary(unittest.TestCase):
    def test_base_vocabulary_has_sixteen_tokens(self):
        self.assertEqual(len(BASE_VOCABULARY), 16)
        self.assertEqual(len(set(BASE_VOCABULARY)), 16)

    def test_girl_style_appends_three_tokens(self):
        girl = vocabulary_for(ClothingStyle.GIRL)
        self.assertEqual(len(girl), 19)
        self.assertEqual(girl[-3:], [ClothingItem.DRESS, ClothingItem.SKIRT, ClothingItem.LEGGINGS])

    def test_boy_and_neutral_share_base_vocabulary(self):
        self.assertEqual(vocabulary_for(ClothingStyle.BOY), list(BASE_VOCABULARY))
        self.assertEqual(vocabulary_for("neutral"), list(BASE_VOCABULARY))


class TestWeatherSnapshot(unittest.TestCase):
    def test_day_selects_slot(self):
        snap = _snapshot()
        self.assertEqual(snap.day(DaySlot.TODAY).high, 55)
        self.assertEqual(snap.day(DaySlot.TOMORROW).description, "Light Snow")
        self.assertEqual(snap.day("tomorrow").precipitation_chance, 70)

    def test_snapshot_is_immutable(self):
        snap = _snapshot()
        with self.assertRaises(ValidationError):
            snap.location = "Elsewhere"


class TestUserPreferences(unittest.TestCase):
    def test_defaults(self):
        prefs = UserPreferences()
        self.assertEqual(prefs.child_age, 2)
        self.assertEqual(prefs.clothing_style, ClothingStyle.NEUTRAL)
        self.assertFalse(prefs.has_completed_setup)

    def test_age_bounds_are_enforced(self):
        UserPreferences(child_age=1)
        UserPreferences(child_age=10)
        with self.assertRaises(ValidationError):
            UserPreferences(child_age=0)
        with self.assertRaises(ValidationError):
            UserPreferences(child_age=11)

    def test_unknown_style_rejected(self):
        with self.assertRaises(ValidationError):
            UserPreferences(clothing_style="pirate")


class TestStructuredRecommendation(unittest.TestCase):
    def test_requires_summary_and_items(self):
        StructuredRecommendation(summary="Layer up.", clothing_items=["sweater"])
        with self.assertRaises(ValidationError):
            StructuredRecommendation(summary="", clothing_items=["sweater"])
        with self.assertRaises(ValidationError):
            StructuredRecommendation(summary="Layer up.", clothing_items=[])
        with self.assertRaises(ValidationError):
            StructuredRecommendation(summary="Layer up.")


if __name__ == "__main__":
    unittest.main()
