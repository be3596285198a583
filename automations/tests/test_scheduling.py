"""
Tests for schedule trigger matching.
"""

from datetime import datetime, timezone as dt_timezone

from django.test import SimpleTestCase

from automations.scheduling import parse_time, schedule_is_due, schedule_trigger_data


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


class ScheduleIsDueTest(SimpleTestCase):

    def test_daily_matches_hour_in_schedule_timezone(self):
        schedule = {'time': '09:00', 'timezone': 'America/Chicago'}

        # 15:00 UTC is 09:00 in Chicago (CST, UTC-6)
        self.assertTrue(schedule_is_due('schedule.daily', schedule, utc(2024, 12, 2, 15, 0)))
        self.assertFalse(schedule_is_due('schedule.daily', schedule, utc(2024, 12, 2, 9, 0)))

    def test_weekly_counts_days_from_sunday(self):
        schedule = {'dayOfWeek': 1, 'time': '09:00', 'timezone': 'UTC'}

        # 2024-12-02 is a Monday
        self.assertTrue(schedule_is_due('schedule.weekly', schedule, utc(2024, 12, 2, 9, 30)))
        self.assertFalse(schedule_is_due('schedule.weekly', schedule, utc(2024, 12, 3, 9, 30)))

    def test_weekly_defaults_to_sunday(self):
        schedule = {'time': '08:00', 'timezone': 'UTC'}

        self.assertTrue(schedule_is_due('schedule.weekly', schedule, utc(2024, 12, 1, 8, 0)))

    def test_monthly_day(self):
        schedule = {'dayOfMonth': 1, 'time': '10:00', 'timezone': 'UTC'}

        self.assertTrue(schedule_is_due('schedule.monthly', schedule, utc(2024, 12, 1, 10, 5)))
        self.assertFalse(schedule_is_due('schedule.monthly', schedule, utc(2024, 12, 2, 10, 5)))

    def test_monthly_day_past_month_end_uses_last_day(self):
        schedule = {'dayOfMonth': 31, 'time': '10:00', 'timezone': 'UTC'}

        self.assertTrue(schedule_is_due('schedule.monthly', schedule, utc(2025, 2, 28, 10, 0)))
        self.assertFalse(schedule_is_due('schedule.monthly', schedule, utc(2025, 2, 27, 10, 0)))

    def test_missing_time_defaults_to_midnight(self):
        self.assertTrue(schedule_is_due('schedule.daily', {'timezone': 'UTC'}, utc(2024, 12, 2, 0, 0)))

    def test_invalid_time_never_due(self):
        self.assertFalse(schedule_is_due('schedule.daily', {'time': 'noon'}, utc(2024, 12, 2, 12, 0)))

    def test_non_schedule_trigger_never_due(self):
        self.assertFalse(schedule_is_due('donation.created', {'timezone': 'UTC'}, utc(2024, 12, 2, 0, 0)))

    def test_parse_time(self):
        self.assertEqual(parse_time('09:30'), (9, 30))
        with self.assertRaises(ValueError):
            parse_time('25:00')


class ScheduleTriggerDataTest(SimpleTestCase):

    def test_weekly_data_has_day_of_week(self):
        data = schedule_trigger_data('schedule.weekly', {'timezone': 'UTC'}, utc(2024, 12, 2, 9, 0))

        self.assertEqual(data['dayOfWeek'], 1)
        self.assertTrue(data['timestamp'].startswith('2024-12-02T09:00'))

    def test_monthly_data_has_day_of_month(self):
        data = schedule_trigger_data(
            'schedule.monthly', {'timezone': 'America/Chicago'}, utc(2024, 12, 1, 3, 0))

        # Still November 30th in Chicago
        self.assertEqual(data['dayOfMonth'], 30)
