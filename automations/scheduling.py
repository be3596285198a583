"""
Schedule matching for ``schedule.*`` triggers.

Celery Beat dispatches schedule triggers once an hour. An automation's
schedule is due when the current hour, in the schedule's timezone, is the
hour of its ``time`` and, for weekly and monthly schedules, the day matches.

``dayOfWeek`` counts from Sunday (0) to Saturday (6). A ``dayOfMonth`` past
the end of a short month falls on the month's last day.
"""

import calendar
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

from .definitions import TriggerType

DEFAULT_TIME = '00:00'


def parse_time(value):
    """Parse ``HH:MM`` into ``(hour, minute)``."""
    hour, _, minute = (value or DEFAULT_TIME).partition(':')
    hour, minute = int(hour), int(minute or 0)
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid schedule time: {value}")
    return hour, minute


def get_schedule_timezone(schedule):
    name = (schedule or {}).get('timezone') or settings.TIME_ZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(settings.TIME_ZONE)


def sunday_based_weekday(moment):
    """Weekday with Sunday as 0, as the automation builder stores it."""
    return (moment.weekday() + 1) % 7


def schedule_is_due(trigger_type, schedule, now=None):
    """
    Whether a schedule trigger should fire in the hour containing ``now``.

    Args:
        trigger_type: ``schedule.daily``, ``schedule.weekly`` or ``schedule.monthly``
        schedule: The trigger's ``schedule`` mapping
        now: Aware datetime, defaults to the current time
    """
    schedule = schedule or {}
    now = now or datetime.now(tz=ZoneInfo('UTC'))
    local = now.astimezone(get_schedule_timezone(schedule))

    try:
        hour, _minute = parse_time(schedule.get('time'))
    except (TypeError, ValueError):
        return False

    if local.hour != hour:
        return False

    if trigger_type == TriggerType.SCHEDULE_DAILY:
        return True

    if trigger_type == TriggerType.SCHEDULE_WEEKLY:
        return sunday_based_weekday(local) == schedule.get('dayOfWeek', 0)

    if trigger_type == TriggerType.SCHEDULE_MONTHLY:
        day_of_month = schedule.get('dayOfMonth', 1)
        last_day = calendar.monthrange(local.year, local.month)[1]
        return local.day == min(day_of_month, last_day)

    return False


def schedule_trigger_data(trigger_type, schedule, now):
    """Trigger data passed to a scheduled run."""
    now = now.astimezone(get_schedule_timezone(schedule))
    data = {'timestamp': now.isoformat()}
    if trigger_type == TriggerType.SCHEDULE_WEEKLY:
        data['dayOfWeek'] = sunday_based_weekday(now)
    elif trigger_type == TriggerType.SCHEDULE_MONTHLY:
        data['dayOfMonth'] = now.day
    return data
