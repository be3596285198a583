"""
Trigger dispatch: turn an event into queued automation runs.
"""

import structlog

from ..conditions import resolve_field
from ..models import Automation, AutomationRun

logger = structlog.get_logger(__name__)


def filters_match(filters, data):
    """True when every trigger filter equals the corresponding event value."""
    return all(resolve_field(data, field) == expected for field, expected in (filters or {}).items())


def create_run(automation, trigger_data, source=AutomationRun.Source.SYSTEM, triggered_by=None):
    """Create a pending run for ``automation``; every step starts as ``pending``."""
    return AutomationRun.objects.create(
        automation=automation,
        automation_name=automation.name,
        triggered_by=triggered_by or automation.trigger_type,
        trigger_data=trigger_data or {},
        source=source,
        steps=[
            {
                'stepId': step.get('id'),
                'action': (step.get('action') or {}).get('type'),
                'status': AutomationRun.StepStatus.PENDING.value,
            }
            for step in automation.steps
        ],
    )


def start_run(automation, trigger_data, source=AutomationRun.Source.SYSTEM, triggered_by=None):
    """Create a run and queue it for execution."""
    from ..tasks import execute_automation_run

    run = create_run(automation, trigger_data, source=source, triggered_by=triggered_by)
    execute_automation_run.delay(run.id)
    return run


def matching_automations(trigger_type, data):
    candidates = Automation.objects.active().for_trigger(trigger_type)
    return [
        automation for automation in candidates
        if filters_match(automation.get_trigger().filters, data)
    ]


def dispatch_trigger(trigger_type, data, source=AutomationRun.Source.SYSTEM):
    """
    Start a run for every active automation listening to ``trigger_type``.

    Automations whose trigger filters do not match ``data`` are left out.

    Returns:
        list: The created runs, in automation order
    """
    runs = [
        start_run(automation, data, source=source, triggered_by=trigger_type)
        for automation in matching_automations(trigger_type, data)
    ]

    logger.info(
        "Automation trigger dispatched",
        trigger_type=trigger_type,
        source=source,
        triggered_count=len(runs),
    )
    return runs
