import json
import tempfile
import unittest
from pathlib import Path

from pomodoro import CycleConfig
from user_settings import SettingsError, WidgetSettings, load_settings, save_settings


class WidgetSettingsTests(unittest.TestCase):
    def test_defaults_match_classic_widget(self) -> None:
        settings = WidgetSettings()

        self.assertEqual(CycleConfig(), settings.cycle_config())
        self.assertTrue(settings.sound_notification)
        self.assertTrue(settings.use_white_text)
        self.assertTrue(settings.is_first_run)

    def test_merged_applies_known_keys(self) -> None:
        settings = WidgetSettings().merged({"long_break_minutes": 20, "count_backwards": True})

        self.assertEqual(
            CycleConfig(long_break_minutes=20, count_backwards=True),
            settings.cycle_config(),
        )

    def test_invalid_values_raise_settings_error(self) -> None:
        cases = (
            {"work_minutes": -1},
            {"break_minutes": "5"},
            {"sound_notification": "yes"},
            {"shadow_opacity": 1.2},
            {"clock_opacity": True},
            {"unknown": 1},
        )
        for changes in cases:
            with self.subTest(changes=changes):
                with self.assertRaises(SettingsError):
                    WidgetSettings().merged(changes)


class SettingsFileTests(unittest.TestCase):
    def setUp(self) -> None:
        temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(temp_dir.cleanup)
        self.path = Path(temp_dir.name) / "nested" / "settings.json"

    def test_missing_file_loads_defaults(self) -> None:
        self.assertEqual(WidgetSettings(), load_settings(self.path))

    def test_save_then_load_preserves_values(self) -> None:
        settings = WidgetSettings(work_minutes=45, clock_opacity=0.9, is_first_run=False)
        save_settings(self.path, settings)

        self.assertEqual(settings, load_settings(self.path))
        self.assertFalse(self.path.with_suffix(".tmp").exists())

    def test_partial_file_keeps_defaults_for_missing_keys(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"break_minutes": 7}), encoding="utf-8")

        settings = load_settings(self.path)
        self.assertEqual(7, settings.break_minutes)
        self.assertEqual(25, settings.work_minutes)

    def test_corrupt_file_raises_settings_error(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("[]", encoding="utf-8")

        with self.assertRaises(SettingsError):
            load_settings(self.path)


if __name__ == "__main__":
    unittest.main()
