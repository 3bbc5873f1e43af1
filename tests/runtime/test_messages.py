import unittest
from dataclasses import replace

from pomodoro import SessionSnapshot
from runtime.messages import (
    category_time_text,
    completion_text,
    default_action_text,
    primary_action_label,
    primary_command,
    rejection_text,
    reset_visible,
    session_counter_text,
    status_message,
)
from runtime.ui import session_payload

_READY = SessionSnapshot(
    phase="paused",
    current_session_type="work",
    time_remaining=1500.0,
    completed_work_sessions=0,
    categories={"General": 0.0, "Programming": 3000.0},
    selected_category="General",
    last_tick_timestamp=None,
    just_completed=False,
    work_duration=1500.0,
    short_break_duration=300.0,
    long_break_duration=1800.0,
    work_sessions_before_long_break=4,
)


class ControlLabelTests(unittest.TestCase):
    def test_primary_button_follows_state(self) -> None:
        cases = [
            (_READY, "start_or_resume", "Start Work"),
            (replace(_READY, time_remaining=1200.0), "start_or_resume", "Resume"),
            (replace(_READY, phase="work"), "pause", "Pause"),
            (replace(_READY, phase="short_break", current_session_type="short_break"), "pause", "Pause"),
            (replace(_READY, current_session_type="short_break", time_remaining=300.0), "start_break", "Start Short Break"),
            (replace(_READY, current_session_type="long_break", time_remaining=1800.0), "start_break", "Start Long Break"),
        ]
        for snapshot, command, label in cases:
            with self.subTest(label=label, phase=snapshot.phase):
                self.assertEqual(command, primary_command(snapshot))
                self.assertEqual(label, primary_action_label(snapshot))

    def test_reset_hidden_only_when_ready(self) -> None:
        self.assertFalse(reset_visible(_READY))
        self.assertTrue(reset_visible(replace(_READY, phase="work")))
        self.assertTrue(reset_visible(replace(_READY, time_remaining=10.0)))

    def test_counter_and_category_time(self) -> None:
        snapshot = replace(_READY, completed_work_sessions=2, selected_category="Programming")
        self.assertEqual("Session 2/4", session_counter_text(snapshot))
        self.assertEqual("Programming: 50:00", category_time_text(snapshot))


class StatusTextTests(unittest.TestCase):
    def test_status_message_when_running_and_paused(self) -> None:
        running = replace(_READY, phase="work", time_remaining=754.0)
        self.assertEqual("Work running (12:34 remaining)", status_message(running))
        self.assertEqual("Ready to Start", status_message(_READY))

    def test_completion_text(self) -> None:
        after_work = replace(_READY, current_session_type="short_break", time_remaining=300.0)
        self.assertEqual(
            "Work session complete. 25:00 logged to General. Ready for a short break.",
            completion_text("work", after_work),
        )
        self.assertEqual("Break over. Ready to work.", completion_text("short_break", _READY))

    def test_action_and_rejection_text(self) -> None:
        self.assertEqual(
            "Work resumed with 20:00 remaining.",
            default_action_text("start_or_resume", "resumed", replace(_READY, time_remaining=1200.0)),
        )
        self.assertEqual(
            "The timer is already paused.",
            default_action_text("pause", "already_paused", _READY),
        )
        self.assertEqual(
            "No break is due yet. Finish a work session first.",
            rejection_text("start_break", "not_break_pending"),
        )
        self.assertEqual("Unsupported command: skip", rejection_text("skip", "unsupported_action"))


class SessionPayloadTests(unittest.TestCase):
    def test_payload_lists_sorted_categories_and_controls(self) -> None:
        payload = session_payload(replace(_READY, categories={"Zeta": 60.0, "General": 0.0}))

        self.assertEqual("paused", payload["phase"])
        self.assertEqual("25:00", payload["time_text"])
        self.assertEqual("Session 0/4", payload["session_counter"])
        self.assertEqual(
            [
                {"name": "General", "seconds": 0.0, "time_text": "00:00"},
                {"name": "Zeta", "seconds": 60.0, "time_text": "01:00"},
            ],
            payload["categories"],
        )
        self.assertEqual(
            {"primary_command": "start_or_resume", "primary_label": "Start Work", "reset_visible": False},
            payload["controls"],
        )


if __name__ == "__main__":
    unittest.main()
