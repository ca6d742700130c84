import datetime as dt
import unittest
from unittest.mock import patch

from pomodoro import CycleConfig, PomodoroCycleController

COMPLETED_AT = dt.datetime(2024, 3, 4, 9, 30, tzinfo=dt.timezone.utc)


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CycleControllerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        patcher = patch("pomodoro.stopwatch.time.monotonic", new=self.clock)
        patcher.start()
        self.addCleanup(patcher.stop)

    def make_controller(self, **config) -> PomodoroCycleController:
        return PomodoroCycleController(
            CycleConfig(**config),
            now_fn=lambda: COMPLETED_AT,
        )

    def run_phase(self, controller: PomodoroCycleController):
        controller.start()
        self.clock.advance(controller.snapshot().duration_seconds)
        return controller.tick()


class ControllerStateTests(CycleControllerTestCase):
    def test_initial_state_shows_reset_clock(self) -> None:
        controller = self.make_controller()
        update = controller.sync()

        self.assertEqual("work", update.snapshot.phase)
        self.assertEqual(0, update.snapshot.period_count)
        self.assertFalse(update.snapshot.running)
        self.assertEqual(1500, update.snapshot.duration_seconds)
        self.assertEqual("00:00", update.display.text)
        self.assertIsNone(update.display.period)
        self.assertEqual("none", update.display.state)
        self.assertEqual((), update.notifications)

    def test_start_runs_work_phase_and_plays_tick(self) -> None:
        controller = self.make_controller()
        update = controller.start()

        self.assertEqual("start", update.action)
        self.assertEqual("started", update.reason)
        self.assertTrue(update.snapshot.running)
        self.assertEqual(("tick_started",), update.notifications)
        self.assertEqual("00:00", update.display.text)
        self.assertEqual(1, update.display.period)
        self.assertEqual("normal", update.display.state)
        self.assertEqual(0, update.snapshot.period_count)

    def test_tick_emits_once_per_elapsed_second(self) -> None:
        controller = self.make_controller()
        controller.start()

        self.assertIsNone(controller.tick())
        self.clock.advance(0.5)
        self.assertIsNone(controller.tick())
        self.clock.advance(0.5)
        update = controller.tick()

        self.assertIsNotNone(update)
        if update is None:
            self.fail("Expected a tick update")
        self.assertEqual("tick", update.action)
        self.assertEqual(1, update.snapshot.elapsed_seconds)
        self.assertEqual("00:01", update.display.text)
        self.assertAlmostEqual(1 / 1500, update.display.progress)

    def test_tick_returns_none_while_stopped(self) -> None:
        controller = self.make_controller()
        self.clock.advance(10)
        self.assertIsNone(controller.tick())

    def test_count_backwards_shows_remaining_time(self) -> None:
        controller = self.make_controller(work_minutes=1, count_backwards=True)
        controller.start()
        self.clock.advance(10)
        update = controller.tick()

        if update is None:
            self.fail("Expected a tick update")
        self.assertEqual("00:50", update.display.text)

    def test_clock_shows_total_minutes_beyond_an_hour(self) -> None:
        controller = self.make_controller(work_minutes=90)
        controller.start()
        self.clock.advance(65 * 60 + 5)
        update = controller.tick()

        if update is None:
            self.fail("Expected a tick update")
        self.assertEqual("65:05", update.display.text)


class ControllerCommandTests(CycleControllerTestCase):
    def test_stop_while_running_pauses(self) -> None:
        controller = self.make_controller()
        controller.start()
        self.clock.advance(30)
        update = controller.stop()

        self.assertEqual("stop", update.action)
        self.assertEqual("paused", update.reason)
        self.assertFalse(update.snapshot.running)
        self.assertEqual(30, update.snapshot.elapsed_seconds)
        self.assertEqual("paused", update.display.state)
        self.assertEqual(("silence",), update.notifications)
        self.assertEqual(1, update.snapshot.period)

        self.clock.advance(100)
        self.assertIsNone(controller.tick())

    def test_start_after_pause_resumes_elapsed_time(self) -> None:
        controller = self.make_controller()
        controller.start()
        self.clock.advance(30)
        controller.stop()
        self.clock.advance(100)

        resumed = controller.start()
        self.clock.advance(5)
        update = controller.tick()

        self.assertEqual("resumed", resumed.reason)
        self.assertEqual("normal", resumed.display.state)
        if update is None:
            self.fail("Expected a tick update")
        self.assertEqual(35, update.snapshot.elapsed_seconds)
        self.assertEqual("00:35", update.display.text)

    def test_stop_while_stopped_resets_cycle(self) -> None:
        controller = self.make_controller(work_minutes=1, break_minutes=1)
        self.run_phase(controller)
        controller.start()
        self.clock.advance(20)
        controller.stop()

        update = controller.stop()

        self.assertEqual("reset", update.reason)
        self.assertEqual("work", update.snapshot.phase)
        self.assertEqual(0, update.snapshot.period_count)
        self.assertEqual(0, update.snapshot.elapsed_seconds)
        self.assertEqual("00:00", update.display.text)
        self.assertIsNone(update.display.period)
        self.assertEqual("none", update.display.state)
        self.assertEqual(("silence",), update.notifications)

    def test_start_while_running_restarts_current_phase(self) -> None:
        controller = self.make_controller()
        controller.start()
        self.clock.advance(30)
        controller.tick()

        update = controller.start()

        self.assertEqual("restarted", update.reason)
        self.assertTrue(update.snapshot.running)
        self.assertEqual(0, update.snapshot.elapsed_seconds)
        self.assertEqual("work", update.snapshot.phase)
        self.assertEqual(("tick_started",), update.notifications)
        self.assertIsNone(controller.tick())

        self.clock.advance(1)
        tick = controller.tick()
        if tick is None:
            self.fail("Expected a tick update")
        self.assertEqual(1, tick.snapshot.elapsed_seconds)

    def test_reset_is_idempotent(self) -> None:
        controller = self.make_controller(work_minutes=1)
        self.run_phase(controller)
        controller.start()
        self.clock.advance(12)

        first = controller.reset()
        second = controller.reset()

        self.assertEqual(first.snapshot, second.snapshot)
        self.assertEqual(first.display, second.display)
        self.assertEqual(0.0, second.snapshot.progress)

    def test_reset_has_no_notifications(self) -> None:
        controller = self.make_controller()
        controller.start()
        self.clock.advance(3)
        update = controller.reset()

        self.assertEqual("reset", update.action)
        self.assertEqual((), update.notifications)
        self.assertFalse(update.snapshot.running)


class ControllerCompletionTests(CycleControllerTestCase):
    def test_work_completion_records_session_and_moves_to_break(self) -> None:
        controller = self.make_controller(work_minutes=1)
        update = self.run_phase(controller)

        if update is None:
            self.fail("Expected a completion update")
        self.assertTrue(update.completed)
        self.assertEqual("completed", update.reason)
        self.assertEqual(COMPLETED_AT, update.completed_at)
        self.assertEqual(("phase_completed",), update.notifications)
        self.assertEqual("short_break", update.snapshot.phase)
        self.assertEqual(1, update.snapshot.period_count)
        self.assertFalse(update.snapshot.running)
        self.assertEqual(0, update.snapshot.elapsed_seconds)
        self.assertEqual("break", update.display.text)
        self.assertEqual(1, update.display.period)
        self.assertEqual("error", update.display.state)
        self.assertAlmostEqual(1.0, update.display.progress)

    def test_break_completion_returns_to_work_without_session(self) -> None:
        controller = self.make_controller(work_minutes=1, break_minutes=1)
        self.run_phase(controller)
        update = self.run_phase(controller)

        if update is None:
            self.fail("Expected a completion update")
        self.assertIsNone(update.completed_at)
        self.assertEqual("work", update.snapshot.phase)
        self.assertEqual(1, update.snapshot.period_count)
        self.assertEqual("work", update.display.text)
        self.assertEqual(("phase_completed",), update.notifications)

    def test_fourth_work_phase_is_followed_by_long_break(self) -> None:
        controller = self.make_controller(work_minutes=1, break_minutes=1, long_break_minutes=2)
        phases = []
        for _ in range(4):
            work_done = self.run_phase(controller)
            if work_done is None:
                self.fail("Expected a completion update")
            phases.append(work_done.snapshot.phase)
            if work_done.snapshot.phase == "short_break":
                self.run_phase(controller)

        self.assertEqual(
            ["short_break", "short_break", "short_break", "long_break"],
            phases,
        )
        self.assertEqual(4, controller.snapshot().period_count)
        self.assertEqual(120, controller.snapshot().duration_seconds)

        long_break_done = self.run_phase(controller)
        if long_break_done is None:
            self.fail("Expected a completion update")
        self.assertEqual("work", long_break_done.snapshot.phase)
        self.assertEqual(0, long_break_done.snapshot.period_count)
        self.assertIsNone(long_break_done.display.period)

    def test_late_tick_completes_with_overshoot_progress(self) -> None:
        controller = self.make_controller(work_minutes=1)
        controller.start()
        self.clock.advance(90)
        update = controller.tick()

        if update is None:
            self.fail("Expected a completion update")
        self.assertTrue(update.completed)
        self.assertAlmostEqual(1.5, update.display.progress)

    def test_default_work_phase_completes_after_twenty_five_minutes(self) -> None:
        controller = self.make_controller()
        controller.start()
        self.clock.advance(1499)
        before = controller.tick()
        self.clock.advance(1)
        after = controller.tick()

        if before is None or after is None:
            self.fail("Expected tick and completion updates")
        self.assertFalse(before.completed)
        self.assertEqual("24:59", before.display.text)
        self.assertTrue(after.completed)
        self.assertEqual("short_break", after.snapshot.phase)
        self.assertEqual(1, after.snapshot.period_count)

    def test_period_count_stays_within_a_set(self) -> None:
        controller = self.make_controller(work_minutes=1, break_minutes=1, long_break_minutes=1)
        counts = []
        for step in range(40):
            if step % 7 == 3:
                controller.stop()
            elif step % 11 == 5:
                controller.start()
                controller.start()
            else:
                self.run_phase(controller)
            counts.append(controller.snapshot().period_count)

        self.assertTrue(all(0 <= count <= 4 for count in counts), counts)

    def test_ticks_stop_after_completion_until_next_start(self) -> None:
        controller = self.make_controller(work_minutes=1)
        self.run_phase(controller)
        self.clock.advance(5)
        self.assertIsNone(controller.tick())


class ControllerConfigTests(CycleControllerTestCase):
    def test_update_config_applies_immediately_when_idle(self) -> None:
        controller = self.make_controller()
        update = controller.update_config(CycleConfig(work_minutes=10))

        self.assertEqual("sync", update.action)
        self.assertEqual("settings", update.reason)
        self.assertEqual(600, update.snapshot.duration_seconds)
        self.assertEqual(10, controller.config.work_minutes)

    def test_duration_change_waits_for_phase_boundary(self) -> None:
        controller = self.make_controller()
        controller.start()
        self.clock.advance(10)
        update = controller.update_config(CycleConfig(work_minutes=30))

        self.assertEqual(1500, update.snapshot.duration_seconds)
        self.assertEqual(1800, controller.reset().snapshot.duration_seconds)

    def test_count_backwards_applies_mid_phase(self) -> None:
        controller = self.make_controller()
        controller.start()
        self.clock.advance(5)
        controller.tick()
        update = controller.update_config(CycleConfig(count_backwards=True))

        self.assertTrue(update.snapshot.count_backwards)
        self.assertEqual("24:55", update.display.text)
        self.assertEqual("normal", update.display.state)


if __name__ == "__main__":
    unittest.main()
