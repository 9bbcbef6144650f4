"""Tests for the text formatter."""

import unittest

from waka_readme.formatter import format_label, format_row, progress_bar, ratio


class TestProgressBar(unittest.TestCase):
    """Test progress bar rendering."""

    def test_empty_bar(self):
        """Verify zero renders only empty cells."""
        self.assertEqual(progress_bar(0.0), "-" * 25)

    def test_full_bar(self):
        """Verify one renders only filled cells."""
        self.assertEqual(progress_bar(1.0), "#" * 25)

    def test_half_bar_rounds_down(self):
        """Verify the filled count is floored."""
        self.assertEqual(progress_bar(0.5), "#" * 12 + "-" * 13)

    def test_bar_width_is_constant(self):
        for fraction in (0.0, 0.01, 0.33, 0.999, 1.0):
            self.assertEqual(len(progress_bar(fraction)), 25)

    def test_out_of_range_rejected(self):
        """Verify fractions outside [0, 1] are a contract violation."""
        with self.assertRaises(ValueError):
            progress_bar(-0.1)
        with self.assertRaises(ValueError):
            progress_bar(1.5)
        with self.assertRaises(ValueError):
            progress_bar(float("nan"))


class TestFormatLabel(unittest.TestCase):
    """Test label truncation and tab padding."""

    def test_long_label_truncated_with_ellipsis(self):
        """Verify labels over 15 characters end in an ellipsis at 15."""
        label = format_label("ExactlyFifteenCh", 2)
        self.assertEqual(label, "ExactlyFifte...\t")
        self.assertEqual(len(label.rstrip("\t")), 15)

    def test_fifteen_characters_kept(self):
        self.assertEqual(format_label("abcdefghijklmno", 2), "abcdefghijklmno\t")

    def test_short_label_gets_all_tabs(self):
        self.assertEqual(format_label("Monday", 2), "Monday\t\t")

    def test_tab_count_follows_tab_stops(self):
        """Verify one tab stop is consumed per eight characters."""
        self.assertEqual(format_label("8 commits", 2), "8 commits\t")
        self.assertEqual(format_label("1234567", 2), "1234567\t\t")
        self.assertEqual(format_label("12345678", 2), "12345678\t")


class TestRatio(unittest.TestCase):

    def test_zero_total(self):
        """Verify an empty total yields zero instead of dividing."""
        self.assertEqual(ratio(0, 0), 0.0)
        self.assertEqual(ratio(3, 0), 0.0)

    def test_regular_ratio(self):
        self.assertEqual(ratio(1, 4), 0.25)


class TestFormatRow(unittest.TestCase):

    def test_row_layout(self):
        """Verify label, value, bar and percentage are joined with tabs."""
        row = format_row("Python", "2 repos", 0.5, 50.0)
        self.assertEqual(row, "Python\t\t2 repos\t\t" + "#" * 12 + "-" * 13 + "\t50.00%\n")


if __name__ == "__main__":
    unittest.main()
