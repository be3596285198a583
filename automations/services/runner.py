"""
Automation run execution.

``AutomationRunner.execute`` walks an automation's steps in order for one
run:

- a step whose guard conditions fail is skipped
- the step config is rendered against the trigger data and handed to the
  executor for its action type
- ``onSuccess`` / ``onFailure`` jump forward, skipping the steps in between
- an unhandled failure skips the remaining steps and fails the run
- a ``condition`` action that does not match ends the run early
- a ``delay`` action parks the run and queues the continuation

Step errors are recorded on the step and run. Database errors while saving
the outcome propagate, leaving the run unfinished for the task to retry.
"""

from django.db import transaction
from django.utils import timezone
import structlog

from core.logging.structured import log_automation_event

from ..conditions import evaluate_conditions
from ..definitions import ActionType
from ..exceptions import ActionError
from ..models import AutomationRun
from ..templating import render_config
from .executors import get_executor

logger = structlog.get_logger(__name__)

StepStatus = AutomationRun.StepStatus


def now_iso():
    return timezone.now().isoformat()


def initial_step_results(steps):
    return [
        {'stepId': step.id, 'action': step.action.type, 'status': StepStatus.PENDING.value}
        for step in steps
    ]


def queue_continuation(run, start_index, countdown):
    """Queue the rest of a delayed run."""
    from ..tasks import resume_automation_run

    resume_automation_run.apply_async(args=[run.id, start_index], countdown=countdown)


class AutomationRunner:
    """
    Executes automation runs step by step.

    Args:
        continue_later: callable ``(run, start_index, countdown)`` used to
            schedule the steps after a delay. Defaults to a Celery task.
    """

    def __init__(self, continue_later=None):
        self.continue_later = continue_later or queue_continuation

    def execute(self, run, start_index=0):
        automation = run.automation
        steps = automation.get_steps()
        data = run.trigger_data or {}

        results = run.steps
        if len(results) != len(steps):
            results = initial_step_results(steps)
        run.steps = results

        if start_index == 0:
            log_automation_event('run_started', run=run, details={'step_count': len(steps)})

        index = start_index
        while index < len(steps):
            step = steps[index]
            result = results[index]

            if not evaluate_conditions(step.conditions, data):
                result['status'] = StepStatus.SKIPPED.value
                index += 1
                continue

            result['status'] = StepStatus.RUNNING.value
            result['startedAt'] = now_iso()

            try:
                config = render_config(step.action.config, data)
                output = get_executor(step.action.type).execute(config, data, run)
            except ActionError as exc:
                error = str(exc)
            except Exception as exc:
                logger.error(
                    "Unexpected error executing automation step",
                    run_id=run.id,
                    step_id=step.id,
                    action=step.action.type,
                    error=str(exc),
                    exc_info=True,
                )
                error = str(exc) or type(exc).__name__
            else:
                error = None

            result['completedAt'] = now_iso()

            if error is not None:
                result['status'] = StepStatus.FAILED.value
                result['error'] = error
                log_automation_event('step_failed', run=run, details={
                    'step_id': step.id,
                    'action': step.action.type,
                    'error': error,
                })

                if step.on_failure:
                    index = self._jump(steps, results, index, step.on_failure)
                    continue

                self._skip_from(results, index + 1)
                return self._finish(run, AutomationRun.Status.FAILED, f"Step {index + 1} failed: {error}")

            result['status'] = StepStatus.COMPLETED.value
            result['output'] = output

            if step.action.type == ActionType.CONDITION and not output.get('matched'):
                self._skip_from(results, index + 1)
                return self._finish(run, AutomationRun.Status.COMPLETED)

            if step.action.type == ActionType.DELAY and index + 1 < len(steps):
                next_index = self._next_index(steps, results, index, step.on_success)
                run.save(update_fields=['steps'])
                logger.info(
                    "Automation run delayed",
                    run_id=run.id,
                    resume_at=output['resumeAt'],
                    next_step=next_index,
                )
                self.continue_later(run, next_index, output['delaySeconds'])
                return run

            index = self._next_index(steps, results, index, step.on_success)

        return self._finish(run, AutomationRun.Status.COMPLETED)

    def _next_index(self, steps, results, index, on_success):
        if on_success:
            return self._jump(steps, results, index, on_success)
        return index + 1

    def _jump(self, steps, results, index, target_id):
        """Index of ``target_id``, skipping the steps passed over."""
        for target in range(index + 1, len(steps)):
            if steps[target].id == target_id:
                for skipped in range(index + 1, target):
                    results[skipped]['status'] = StepStatus.SKIPPED.value
                return target

        logger.warning(
            "Step jump target not found, continuing with next step",
            step_id=steps[index].id,
            target=target_id,
        )
        return index + 1

    def _skip_from(self, results, start):
        for result in results[start:]:
            result['status'] = StepStatus.SKIPPED.value

    def _finish(self, run, status, error=''):
        completed_at = timezone.now()
        run.status = status
        run.error = error
        run.completed_at = completed_at
        run.duration = max(int((completed_at - run.started_at).total_seconds() * 1000), 0)
        with transaction.atomic():
            run.save(update_fields=['steps', 'status', 'error', 'completed_at', 'duration'])
            run.automation.record_run_finished(completed_at)

        event = 'run_completed' if status == AutomationRun.Status.COMPLETED else 'run_failed'
        log_automation_event(event, run=run, details={
            'status': status,
            'duration_ms': run.duration,
            'error': error or None,
        })
        return run
