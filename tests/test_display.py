"""Unit tests for the basic calculator display buffer and history."""

import unittest

from calcflow_pkg.display import BUTTONS, ERROR_SENTINEL, RESET_SENTINEL, DisplayBuffer
from calcflow_pkg.history import HistoryLog
from calcflow_pkg.types import HistoryEntry


class TestAppend(unittest.TestCase):
    def setUp(self):
        self.buffer = DisplayBuffer()

    def test_starts_at_reset(self):
        self.assertEqual(self.buffer.value, RESET_SENTINEL)
        self.assertEqual(self.buffer.state, "idle")

    def test_concatenates_tokens(self):
        for token in ["1", "2", "+", "3"]:
            self.buffer.append(token)
        self.assertEqual(self.buffer.value, "12+3")
        self.assertEqual(self.buffer.state, "editing")

    def test_reset_replaced_by_first_token(self):
        self.buffer.append("7")
        self.assertEqual(self.buffer.value, "7")

    def test_reset_replaced_by_zero(self):
        self.buffer.append("0")
        self.assertEqual(self.buffer.value, "0")

    def test_decimal_point_keeps_leading_zero(self):
        self.buffer.append(".")
        self.buffer.append("5")
        self.assertEqual(self.buffer.value, "0.5")

    def test_operator_replaces_reset(self):
        self.buffer.append("-")
        self.buffer.append("4")
        self.assertEqual(self.buffer.value, "-4")

    def test_consecutive_operators_accepted(self):
        for token in ["1", "+", "+", "2"]:
            self.buffer.append(token)
        self.assertEqual(self.buffer.value, "1++2")

    def test_error_replaced_wholesale(self):
        self.buffer.append("2+")
        self.buffer.evaluate()
        self.assertEqual(self.buffer.value, ERROR_SENTINEL)
        self.buffer.append("7")
        self.assertEqual(self.buffer.value, "7")

    def test_error_replaced_by_decimal_point(self):
        self.buffer.append("*")
        self.buffer.evaluate()
        self.buffer.append(".")
        self.assertEqual(self.buffer.value, ".")


class TestBackspaceAndClear(unittest.TestCase):
    def setUp(self):
        self.buffer = DisplayBuffer()

    def test_backspace_removes_last_character(self):
        self.buffer.append("123")
        self.buffer.backspace()
        self.assertEqual(self.buffer.value, "12")

    def test_backspace_terminates_at_reset(self):
        self.buffer.append("123")
        for _ in range(10):
            self.buffer.backspace()
            self.assertNotEqual(self.buffer.value, "")
        self.assertEqual(self.buffer.value, RESET_SENTINEL)

    def test_backspace_on_error(self):
        self.buffer.append("2+")
        self.buffer.evaluate()
        for _ in range(len(ERROR_SENTINEL)):
            self.buffer.backspace()
        self.assertEqual(self.buffer.value, RESET_SENTINEL)

    def test_clear(self):
        self.buffer.append("42")
        self.buffer.clear()
        self.assertEqual(self.buffer.value, RESET_SENTINEL)

    def test_clear_from_error(self):
        self.buffer.append("2+")
        self.buffer.evaluate()
        self.buffer.clear()
        self.assertEqual(self.buffer.state, "idle")


class TestEvaluate(unittest.TestCase):
    def setUp(self):
        self.buffer = DisplayBuffer()

    def test_valid_expression(self):
        self.buffer.append("2+3*4")
        self.assertTrue(self.buffer.evaluate())
        self.assertEqual(self.buffer.value, "14")
        self.assertEqual(self.buffer.history.lines(), ["2+3*4 = 14"])

    def test_invalid_expression(self):
        self.buffer.append("2+")
        self.assertFalse(self.buffer.evaluate())
        self.assertEqual(self.buffer.value, ERROR_SENTINEL)
        self.assertEqual(len(self.buffer.history), 0)
        self.assertIsNotNone(self.buffer.last_error)

    def test_consecutive_operators_fail_at_evaluate(self):
        self.buffer.append("2*/3")
        self.assertFalse(self.buffer.evaluate())
        self.assertEqual(self.buffer.value, ERROR_SENTINEL)

    def test_unary_plus_sequence_evaluates(self):
        self.buffer.append("1++2")
        self.buffer.evaluate()
        self.assertEqual(self.buffer.value, "3")

    def test_fraction_result(self):
        self.buffer.append("7/2")
        self.buffer.evaluate()
        self.assertEqual(self.buffer.value, "3.5")

    def test_repeating_fraction_result(self):
        self.buffer.append("1/3")
        self.buffer.evaluate()
        self.assertEqual(self.buffer.value, "0.3333333333333333")

    def test_division_by_zero_shows_infinity(self):
        self.buffer.append("1/0")
        self.assertTrue(self.buffer.evaluate())
        self.assertEqual(self.buffer.value, "Infinity")

    def test_negative_division_by_zero_shows_negative_infinity(self):
        self.buffer.append("-1/0")
        self.assertTrue(self.buffer.evaluate())
        self.assertEqual(self.buffer.value, "-Infinity")
        self.assertEqual(self.buffer.history.lines(), ["-1/0 = -Infinity"])

    def test_power_tower_is_error(self):
        self.buffer.append("9**9**9")
        self.assertFalse(self.buffer.evaluate())
        self.assertEqual(self.buffer.value, ERROR_SENTINEL)
        self.assertEqual(self.buffer.last_error, "Expression too complex")

    def test_result_can_be_extended(self):
        self.buffer.append("2+3")
        self.buffer.evaluate()
        self.buffer.append("*2")
        self.buffer.evaluate()
        self.assertEqual(self.buffer.value, "10")
        self.assertEqual(self.buffer.history.lines(), ["2+3 = 5", "5*2 = 10"])

    def test_history_keeps_last_five(self):
        for i in range(1, 8):
            self.buffer.clear()
            self.buffer.append(f"{i}+1")
            self.buffer.evaluate()
        self.assertEqual(
            self.buffer.history.lines(),
            ["3+1 = 4", "4+1 = 5", "5+1 = 6", "6+1 = 7", "7+1 = 8"],
        )


class TestPress(unittest.TestCase):
    def test_keypad_sequence(self):
        buffer = DisplayBuffer()
        for button in ["9", "*", "9", "="]:
            buffer.press(button)
        self.assertEqual(buffer.value, "81")
        buffer.press("C")
        self.assertEqual(buffer.value, RESET_SENTINEL)

    def test_keypad_layout(self):
        self.assertEqual(len(BUTTONS), 17)
        self.assertIn("=", BUTTONS)
        self.assertIn("C", BUTTONS)


class TestHistoryLog(unittest.TestCase):
    def test_sliding_window(self):
        log = HistoryLog()
        for i in range(7):
            log.record(HistoryEntry(str(i), str(i)))
        self.assertEqual(len(log), 5)
        self.assertEqual([e.source for e in log], ["2", "3", "4", "5", "6"])

    def test_custom_limit(self):
        log = HistoryLog(limit=2)
        for i in range(3):
            log.record(HistoryEntry(str(i), "x"))
        self.assertEqual(log.lines(), ["1 = x", "2 = x"])
        self.assertEqual(log.limit, 2)

    def test_invalid_limit(self):
        with self.assertRaises(ValueError):
            HistoryLog(limit=0)

    def test_entry_rendering(self):
        self.assertEqual(str(HistoryEntry("2+2", "4")), "2+2 = 4")


if __name__ == "__main__":
    unittest.main()
