import unittest

from light_widget.models import HalfState
from light_widget.schedule_codec import HALF_STATE_COLORS, decode, decode_schedule

ON, OFF, NEUTRAL, UNKNOWN = HalfState.ON, HalfState.OFF, HalfState.NEUTRAL, HalfState.UNKNOWN


class TestDecode(unittest.TestCase):
    def test_code_table(self):
        expected = {
            "0": (ON, ON),
            "1": (OFF, OFF),
            "2": (OFF, ON),
            "3": (ON, OFF),
            "4": (NEUTRAL, NEUTRAL),
            "9": (UNKNOWN, UNKNOWN),
        }
        for code, halves in expected.items():
            with self.subTest(code=code):
                self.assertEqual(decode(code), halves)

    def test_unrecognized_codes_degrade_to_placeholder(self):
        for code in ("5", "x", " ", "-", "7"):
            with self.subTest(code=code):
                self.assertEqual(decode(code), (UNKNOWN, UNKNOWN))

    def test_every_state_has_a_color(self):
        self.assertEqual(set(HALF_STATE_COLORS), set(HalfState))


class TestDecodeSchedule(unittest.TestCase):
    def test_mixed_day(self):
        hours = decode_schedule("000111222333444000111222")

        self.assertEqual(len(hours), 24)
        self.assertEqual([h.hour for h in hours], list(range(24)))
        self.assertEqual((hours[0].left, hours[0].right), (ON, ON))
        self.assertEqual((hours[3].left, hours[3].right), (OFF, OFF))
        self.assertEqual((hours[6].left, hours[6].right), (OFF, ON))
        self.assertEqual((hours[9].left, hours[9].right), (ON, OFF))
        self.assertEqual((hours[12].left, hours[12].right), (NEUTRAL, NEUTRAL))

    def test_each_hour_matches_its_code(self):
        schedule = "0123499a0123499a01234999"
        hours = decode_schedule(schedule)
        for hour, code in zip(hours, schedule):
            self.assertEqual((hour.left, hour.right), decode(code))

    def test_short_or_missing_is_empty(self):
        for value in (None, "", "0", "0" * 10, "0" * 23):
            with self.subTest(value=value):
                self.assertEqual(decode_schedule(value), ())

    def test_extra_characters_are_ignored(self):
        hours = decode_schedule("1" * 24 + "000")
        self.assertEqual(len(hours), 24)
        self.assertTrue(all(h.left is OFF and h.right is OFF for h in hours))


if __name__ == "__main__":
    unittest.main()
