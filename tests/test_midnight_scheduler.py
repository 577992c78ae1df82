import unittest
from datetime import datetime
from unittest.mock import MagicMock

from light_widget.handlers.widget_handler import WidgetHandler
from light_widget.services.midnight_scheduler import MidnightScheduler, SchedulerState
from light_widget.store import MemoryStore
from light_widget.surface import WidgetSurface
from tests.fakes import KYIV, FakeWaker, fixed_clock


class TestMidnightScheduler(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.surface = WidgetSurface()
        self.surface.add_instance("1", "GPV1.1")
        self.surface.add_instance("2", "GPV4.2")
        self.handler = WidgetHandler(
            store=self.store, surface=self.surface, tz_name="Europe/Kyiv",
            clock=fixed_clock(2024, 3, 2, 10, 0),
        )
        self.waker = FakeWaker()
        self.scheduler = MidnightScheduler(handler=self.handler, waker=self.waker)

    def test_starts_idle(self):
        self.assertIs(self.scheduler.state, SchedulerState.IDLE)

    def test_next_fire_is_tomorrow_at_0001(self):
        expected = datetime(2024, 3, 3, 0, 1, tzinfo=KYIV)
        self.assertEqual(self.scheduler.next_fire_time(datetime(2024, 3, 2, 10, 0, tzinfo=KYIV)), expected)
        self.assertEqual(self.scheduler.next_fire_time(datetime(2024, 3, 2, 0, 0, 30, tzinfo=KYIV)), expected)
        self.assertEqual(self.scheduler.next_fire_time(datetime(2024, 3, 2, 23, 59, tzinfo=KYIV)), expected)

    def test_next_fire_crosses_month_and_year(self):
        self.assertEqual(
            self.scheduler.next_fire_time(datetime(2024, 12, 31, 12, 0, tzinfo=KYIV)),
            datetime(2025, 1, 1, 0, 1, tzinfo=KYIV),
        )

    def test_arm_registers_exact_wake(self):
        target = self.scheduler.arm()

        self.assertEqual(target, datetime(2024, 3, 3, 0, 1, tzinfo=KYIV))
        self.assertIs(self.scheduler.state, SchedulerState.ARMED)
        self.assertEqual(self.waker.calls, [("exact", target, "midnight-update")])

    def test_exact_not_allowed_uses_inexact(self):
        self.waker.allow_exact = False
        self.scheduler.arm()
        self.assertEqual(self.waker.calls[0][0], "inexact")
        self.assertIs(self.scheduler.state, SchedulerState.ARMED)

    def test_exact_denied_degrades_to_inexact(self):
        self.waker.exact_raises = True
        with self.assertLogs("light_widget.services.midnight_scheduler", level="WARNING"):
            self.scheduler.arm()
        self.assertEqual([c[0] for c in self.waker.calls], ["inexact"])
        self.assertIs(self.scheduler.state, SchedulerState.ARMED)

    def test_total_registration_failure_is_logged(self):
        self.waker.exact_raises = True
        self.waker.inexact_raises = True
        with self.assertLogs("light_widget.services.midnight_scheduler", level="ERROR"):
            self.assertIsNone(self.scheduler.arm())
        self.assertIs(self.scheduler.state, SchedulerState.IDLE)

    def test_fire_renders_every_instance_and_rearms(self):
        self.store.put_bool("is_loading_1", False)
        self.scheduler.arm()

        self.waker.trigger()

        self.assertIsNotNone(self.surface.snapshot("1"))
        self.assertIsNotNone(self.surface.snapshot("2"))
        self.assertFalse(self.store.get_bool("is_loading_1"))
        self.assertEqual(len(self.waker.calls), 2)
        self.assertIs(self.scheduler.state, SchedulerState.ARMED)
        self.assertIn("midnight-update", self.waker.callbacks)

    def test_fire_rearms_even_when_rendering_fails(self):
        handler = MagicMock()
        handler.now_local.return_value = datetime(2024, 3, 3, 0, 1, tzinfo=KYIV)
        handler.render_all.side_effect = RuntimeError("surface crashed")
        scheduler = MidnightScheduler(handler=handler, waker=self.waker)

        with self.assertLogs("light_widget.services.midnight_scheduler", level="ERROR"):
            scheduler.fire()

        self.assertIs(scheduler.state, SchedulerState.ARMED)
        self.assertEqual(scheduler.next_fire, datetime(2024, 3, 4, 0, 1, tzinfo=KYIV))

    def test_rollover_after_fire_shows_tomorrow(self):
        self.store.put_many({
            "schedule_GPV1.1": "0" * 24,
            "schedule_tomorrow_GPV1.1": "1" * 24,
            "last_update_date": "2024-3-1",
        })
        self.scheduler.arm()
        self.waker.trigger()
        self.assertEqual(self.surface.snapshot("1").day_key.value, "tomorrow")

    def test_activate_arms_and_renders(self):
        self.scheduler.activate(["2"])
        self.assertIs(self.scheduler.state, SchedulerState.ARMED)
        self.assertIsNotNone(self.surface.snapshot("2"))
        self.assertIsNone(self.surface.snapshot("1"))


if __name__ == "__main__":
    unittest.main()
