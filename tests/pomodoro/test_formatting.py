import unittest

from pomodoro import state_description, time_string


class TimeStringTests(unittest.TestCase):
    def test_formats_minutes_and_seconds(self) -> None:
        cases = {
            0: "00:00",
            59: "00:59",
            150: "02:30",
            1500: "25:00",
            3600: "60:00",
        }
        for seconds, expected in cases.items():
            with self.subTest(seconds=seconds):
                self.assertEqual(expected, time_string(seconds))

    def test_truncates_fractional_seconds(self) -> None:
        self.assertEqual("24:59", time_string(1499.9))

    def test_negative_values_render_as_zero(self) -> None:
        self.assertEqual("00:00", time_string(-5))


class StateDescriptionTests(unittest.TestCase):
    def test_descriptions_for_every_state(self) -> None:
        cases = [
            (("work", "work", 1200.0), "Work Time - Stay Focused!"),
            (("short_break", "short_break", 120.0), "Short Break - Relax!"),
            (("long_break", "long_break", 120.0), "Long Break - Recharge!"),
            (("paused", "short_break", 300.0), "Work Complete - Ready for Short Break"),
            (("paused", "long_break", 1800.0), "Work Complete - Ready for Long Break"),
            (("paused", "work", 1500.0), "Ready to Start"),
            (("paused", "work", 1200.0), "Paused"),
        ]
        for (phase, session_type, remaining), expected in cases:
            with self.subTest(phase=phase, session_type=session_type):
                self.assertEqual(
                    expected,
                    state_description(phase, session_type, remaining, 1500.0),
                )


if __name__ == "__main__":
    unittest.main()
