"""
Celery tasks for automations app.

Background tasks for:
- Executing queued automation runs
- Resuming runs parked by a delay step
- Dispatching schedule.* triggers (hourly via Celery Beat)
"""

import logging

from celery import shared_task
from django.db import DatabaseError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)


def _load_run(run_id):
    from .models import AutomationRun

    try:
        return AutomationRun.objects.select_related('automation').get(pk=run_id)
    except AutomationRun.DoesNotExist:
        logger.warning(f"Automation run {run_id} no longer exists")
        return None


@shared_task(bind=True, max_retries=3)
def execute_automation_run(self, run_id):
    """
    Execute a queued automation run from its first step.

    Returns:
        dict: Run id and final (or parked) status
    """
    from .services.runner import AutomationRunner

    run = _load_run(run_id)
    if run is None:
        return {'run_id': run_id, 'status': 'missing'}

    if run.is_finished:
        logger.info(f"Automation run {run_id} already {run.status}, skipping")
        return {'run_id': run_id, 'status': run.status}

    try:
        run = AutomationRunner().execute(run)
    except DatabaseError as exc:
        logger.error(f"Automation run {run_id} failed to persist: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60)

    return {'run_id': run.id, 'status': run.status}


@shared_task(bind=True, max_retries=3)
def resume_automation_run(self, run_id, start_index):
    """Continue a delayed run from ``start_index``."""
    from .services.runner import AutomationRunner

    run = _load_run(run_id)
    if run is None:
        return {'run_id': run_id, 'status': 'missing'}

    if run.is_finished:
        logger.info(f"Automation run {run_id} was {run.status} while delayed, not resuming")
        return {'run_id': run_id, 'status': run.status}

    try:
        run = AutomationRunner().execute(run, start_index=start_index)
    except DatabaseError as exc:
        logger.error(f"Automation run {run_id} failed to resume: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=60)

    return {'run_id': run.id, 'status': run.status}


@shared_task(bind=True, max_retries=3)
def dispatch_scheduled_automations(self, trigger_type, automation_ids=None, scheduled_at=None):
    """
    Start runs for schedule automations due this hour.

    Runs hourly for each of schedule.daily, schedule.weekly and
    schedule.monthly via Celery Beat.

    Each automation is dispatched on its own. When some of them fail to start,
    the retry covers only those automations and keeps the original hour, so
    automations that already got a run are not started twice.

    Args:
        trigger_type: schedule.daily, schedule.weekly or schedule.monthly
        automation_ids: Restrict dispatch to these automations (retries)
        scheduled_at: ISO timestamp of the hour being dispatched (retries)

    Returns:
        dict: Summary of dispatched runs
    """
    from .models import Automation, AutomationRun
    from .scheduling import schedule_is_due, schedule_trigger_data
    from .services.dispatcher import start_run

    now = parse_datetime(scheduled_at) if scheduled_at else timezone.now()

    try:
        candidates = Automation.objects.active().for_trigger(trigger_type)
        if automation_ids is not None:
            candidates = candidates.filter(pk__in=automation_ids)
        due = []
        for automation in candidates:
            trigger = automation.get_trigger()
            if schedule_is_due(trigger_type, trigger.schedule, now):
                due.append((automation, trigger))
    except DatabaseError as exc:
        logger.error(f"Scheduled dispatch {trigger_type} failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=300)

    run_ids = []
    failed_ids = []
    last_error = None

    for automation, trigger in due:
        try:
            run = start_run(
                automation,
                schedule_trigger_data(trigger_type, trigger.schedule, now),
                source=AutomationRun.Source.SCHEDULED,
            )
        except DatabaseError as exc:
            logger.error(
                f"Scheduled run for automation {automation.pk} could not be started: {exc}",
                exc_info=True
            )
            failed_ids.append(automation.pk)
            last_error = exc
            continue
        run_ids.append(run.id)

    logger.info(f"Scheduled dispatch {trigger_type}: {len(run_ids)} run(s) started")

    if failed_ids:
        raise self.retry(
            exc=last_error,
            args=[trigger_type],
            kwargs={'automation_ids': failed_ids, 'scheduled_at': now.isoformat()},
            countdown=300,
        )

    return {
        'trigger_type': trigger_type,
        'dispatched': len(run_ids),
        'run_ids': run_ids,
        'status': 'success',
    }
