"""
Throttling classes for automations app.
"""

from rest_framework.throttling import UserRateThrottle


class AutomationTriggerThrottle(UserRateThrottle):
    """
    Throttle for event trigger dispatch.

    Rate comes from DEFAULT_THROTTLE_RATES['automation_trigger'].
    Every dispatched event can fan out into several runs.
    """
    scope = 'automation_trigger'


class ManualRunThrottle(UserRateThrottle):
    """
    Throttle for manual test runs.

    Rate comes from DEFAULT_THROTTLE_RATES['automation_manual_run'].
    """
    scope = 'automation_manual_run'
