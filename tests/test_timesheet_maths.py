import unittest
from datetime import date
from types import SimpleNamespace

from workforce.exceptions import ValidationError
from workforce.services.timesheets import (
    calculate_daily_total, format_remarks, format_week_ending, normalise_entry, total_hours,
    validate_week_ending, week_days, week_ending_for,
)


class TestDailyTotals(unittest.TestCase):

    def test_simple_day(self):
        self.assertEqual(calculate_daily_total("07:00", "16:30"), 9.5)
        self.assertEqual(calculate_daily_total("07:15", "15:35"), 8.33)

    def test_overnight_shift(self):
        self.assertEqual(calculate_daily_total("22:00", "06:00"), 8.0)

    def test_missing_or_bad_times(self):
        self.assertIsNone(calculate_daily_total(None, "16:00"))
        self.assertIsNone(calculate_daily_total("7am", "16:00"))
        self.assertIsNone(calculate_daily_total("25:00", "16:00"))

    def test_did_not_work(self):
        entry = normalise_entry({
            "day_of_week": 6, "did_not_work": True, "time_started": "08:00",
            "time_finished": "12:00", "working_in_yard": True, "daily_total": 4,
        })
        self.assertIsNone(entry["daily_total"])
        self.assertIsNone(entry["time_started"])
        self.assertFalse(entry["working_in_yard"])

    def test_given_total_is_kept(self):
        entry = normalise_entry({"day_of_week": 1, "time_started": "07:00", "time_finished": "15:00",
                                 "daily_total": 7.5})
        self.assertEqual(entry["daily_total"], 7.5)


class TestWeeks(unittest.TestCase):

    def test_week_ending(self):
        self.assertEqual(week_ending_for(date(2026, 3, 12)), date(2026, 3, 15))
        self.assertEqual(week_ending_for(date(2026, 3, 15)), date(2026, 3, 15))
        self.assertEqual(validate_week_ending(date(2026, 3, 15)), date(2026, 3, 15))
        with self.assertRaises(ValidationError):
            validate_week_ending(date(2026, 3, 14))
        self.assertEqual(format_week_ending(date(2026, 3, 15)), "15/03/2026")

    def test_week_rows(self):
        entries = [
            SimpleNamespace(day_of_week=2, time_started="07:00", time_finished="15:00", job_number="J1",
                            working_in_yard=False, did_not_work=False, daily_total=8.0, remarks=None),
            SimpleNamespace(day_of_week=7, time_started=None, time_finished=None, job_number=None,
                            working_in_yard=False, did_not_work=True, daily_total=3.0, remarks=None),
        ]
        rows = week_days(entries)
        self.assertEqual([r.day_name for r in rows][:2], ["Monday", "Tuesday"])
        self.assertEqual(len(rows), 7)
        self.assertIsNone(rows[0].time_started)
        self.assertEqual(rows[1].job_number, "J1")
        # Days off never count, whatever total they carry
        self.assertEqual(total_hours(entries), 8.0)

    def test_remarks(self):
        self.assertEqual(format_remarks(SimpleNamespace(job_number="J1", remarks="Late start")),
                         "Job number J1 - Late start")
        self.assertEqual(format_remarks(SimpleNamespace(job_number="J1", remarks=None)), "Job number J1")
        self.assertEqual(format_remarks(SimpleNamespace(job_number=None, remarks=None)), "")


if __name__ == "__main__":
    unittest.main()
