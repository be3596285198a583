"""
Tests for automation run execution and step executors.
"""

import json
import logging
from unittest.mock import Mock, patch

import requests
from django.core import mail
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.conf import settings

from automations.models import AutomationRun, FollowUpTask, MailingListMembership
from automations.services import AutomationRunner, create_run
from automations.services.executors import SlackExecutor, SmsExecutor
from core.logging.structured import SensitiveDataFilter, StructuredFormatter
from .factories import AutomationFactory, AutomationRunFactory, email_step, list_step

DONATION = {
    'donationId': 'don_123',
    'amount': 5000,
    'donorEmail': 'john@example.com',
    'donorName': 'John Smith',
}


def slack_step(step_id, **extra):
    step = {
        'id': step_id,
        'action': {
            'type': 'send_slack',
            'config': {'channel': '#donations', 'message': 'New gift from {{donorName}}'},
        },
    }
    step.update(extra)
    return step


def step_statuses(run):
    return [result['status'] for result in run.steps]


class AutomationRunnerTest(TestCase):
    """Test step-by-step run execution."""

    def setUp(self):
        self.runner = AutomationRunner(continue_later=Mock())

    def execute(self, automation, data=None, start_index=0):
        run = create_run(automation, DONATION if data is None else data)
        return self.runner.execute(run, start_index=start_index)

    def test_successful_run(self):
        automation = AutomationFactory()

        run = self.execute(automation)

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(step_statuses(run), ['completed', 'completed'])
        self.assertEqual(run.error, '')
        self.assertIsNotNone(run.completed_at)
        self.assertGreaterEqual(run.duration, 0)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['john@example.com'])
        self.assertEqual(mail.outbox[0].subject, 'Thank you John Smith!')
        self.assertIn('gift of 5000', mail.outbox[0].body)

        self.assertTrue(
            MailingListMembership.objects.filter(list_id='donor-updates', email='john@example.com').exists()
        )

        automation.refresh_from_db()
        self.assertEqual(automation.run_count, 1)
        self.assertIsNotNone(automation.last_run_at)

    def test_run_is_persisted(self):
        run = self.execute(AutomationFactory())

        stored = AutomationRun.objects.get(pk=run.pk)
        self.assertEqual(stored.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(stored.steps[0]['output']['recipients'], ['john@example.com'])
        self.assertIn('startedAt', stored.steps[0])
        self.assertIn('completedAt', stored.steps[0])

    def test_failed_step_skips_rest_and_fails_run(self):
        run = self.execute(AutomationFactory(), dict(DONATION, donorEmail='invalid-email'))

        self.assertEqual(run.status, AutomationRun.Status.FAILED)
        self.assertEqual(step_statuses(run), ['failed', 'skipped'])
        self.assertEqual(run.steps[0]['error'], 'Invalid email address')
        self.assertEqual(run.error, 'Step 1 failed: Invalid email address')
        self.assertEqual(len(mail.outbox), 0)

        run.automation.refresh_from_db()
        self.assertEqual(run.automation.run_count, 1)

    def test_guard_conditions_skip_step(self):
        automation = AutomationFactory(steps=[
            email_step(conditions=[{'field': 'amount', 'operator': 'greater_than', 'value': 10000}]),
            list_step(),
        ])

        run = self.execute(automation)

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(step_statuses(run), ['skipped', 'completed'])
        self.assertEqual(len(mail.outbox), 0)

    def test_on_failure_jumps_to_handler(self):
        automation = AutomationFactory(steps=[
            email_step(onFailure='step3'),
            list_step(),
            slack_step('step3'),
        ])

        run = self.execute(automation, dict(DONATION, donorEmail='invalid-email'))

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(step_statuses(run), ['failed', 'skipped', 'completed'])
        self.assertEqual(run.error, '')

    def test_on_success_skips_steps_in_between(self):
        automation = AutomationFactory(steps=[
            email_step(onSuccess='step3'),
            list_step(),
            slack_step('step3'),
        ])

        run = self.execute(automation)

        self.assertEqual(step_statuses(run), ['completed', 'skipped', 'completed'])
        self.assertFalse(MailingListMembership.objects.exists())

    def test_condition_action_halts_run(self):
        automation = AutomationFactory(steps=[
            {
                'id': 'check',
                'action': {
                    'type': 'condition',
                    'config': {
                        'matchType': 'all',
                        'conditions': [{'field': 'amount', 'operator': 'greater_than', 'value': 100000}],
                    },
                },
            },
            email_step('step2'),
        ])

        run = self.execute(automation)

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(step_statuses(run), ['completed', 'skipped'])
        self.assertEqual(run.steps[0]['output'], {'matched': False})

    def test_delay_parks_run_and_queues_continuation(self):
        automation = AutomationFactory(steps=[
            {'id': 'wait', 'action': {'type': 'delay', 'config': {'duration': 1, 'unit': 'hours'}}},
            email_step('step2'),
        ])

        run = self.execute(automation)

        self.assertEqual(run.status, AutomationRun.Status.RUNNING)
        self.assertEqual(step_statuses(run), ['completed', 'pending'])
        self.assertEqual(run.steps[0]['output']['delaySeconds'], 3600)
        self.runner.continue_later.assert_called_once_with(run, 1, 3600)
        self.assertEqual(len(mail.outbox), 0)

        resumed = self.runner.execute(AutomationRun.objects.get(pk=run.pk), start_index=1)

        self.assertEqual(resumed.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(step_statuses(resumed), ['completed', 'completed'])
        self.assertEqual(len(mail.outbox), 1)

    def test_trailing_delay_completes_run(self):
        automation = AutomationFactory(steps=[
            email_step(),
            {'id': 'wait', 'action': {'type': 'delay', 'config': {'duration': 2, 'unit': 'days'}}},
        ])

        run = self.execute(automation)

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.runner.continue_later.assert_not_called()

    def test_unsupported_action_fails_step(self):
        automation = AutomationFactory(steps=[
            {
                'id': 'step1',
                'action': {'type': 'update_record', 'config': {'recordType': 'donor', 'recordId': 'd1'}},
            },
        ])

        run = self.execute(automation)

        self.assertEqual(run.status, AutomationRun.Status.FAILED)
        self.assertEqual(run.error, 'Step 1 failed: Unsupported action type: update_record')

    def test_unexpected_exception_is_recorded(self):
        automation = AutomationFactory(steps=[list_step('step1')])

        with patch.object(
            MailingListMembership.objects, 'get_or_create',
            side_effect=RuntimeError('database unavailable'),
        ):
            run = self.execute(automation)

        self.assertEqual(run.status, AutomationRun.Status.FAILED)
        self.assertEqual(run.error, 'Step 1 failed: database unavailable')

    def test_finish_is_atomic_with_run_statistics(self):
        automation = AutomationFactory()
        run = create_run(automation, DONATION)

        with patch(
            'automations.models.Automation.record_run_finished',
            side_effect=DatabaseError('connection lost'),
        ):
            with self.assertRaises(DatabaseError):
                self.runner.execute(run)

        stored = AutomationRun.objects.get(pk=run.pk)
        self.assertEqual(stored.status, AutomationRun.Status.RUNNING)
        self.assertIsNone(stored.completed_at)
        self.assertFalse(stored.is_finished)

        automation.refresh_from_db()
        self.assertEqual(automation.run_count, 0)
        self.assertIsNone(automation.last_run_at)


class ExecutorTest(TestCase):
    """Test the individual action executors through the runner."""

    def execute(self, steps, data=None):
        automation = AutomationFactory(steps=steps)
        run = create_run(automation, DONATION if data is None else data)
        return AutomationRunner(continue_later=Mock()).execute(run)

    def test_email_template_body(self):
        run = self.execute([{
            'id': 'step1',
            'action': {
                'type': 'send_email',
                'config': {
                    'to': '{{donorEmail}}',
                    'subject': 'Thank you for your generous gift!',
                    'templateId': 'donation_receipt',
                },
            },
        }])

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(run.steps[0]['output']['templateUsed'], 'donation_receipt')
        self.assertIn('Dear John Smith', mail.outbox[0].body)
        self.assertIn('don_123', mail.outbox[0].body)

    def test_email_unknown_template(self):
        run = self.execute([{
            'id': 'step1',
            'action': {
                'type': 'send_email',
                'config': {'to': '{{donorEmail}}', 'subject': 'Hi', 'templateId': 'no_such_template'},
            },
        }])

        self.assertEqual(run.status, AutomationRun.Status.FAILED)
        self.assertEqual(run.error, 'Step 1 failed: Unknown email template: no_such_template')

    def test_email_multiple_recipients(self):
        run = self.execute(
            [email_step(to='{{attendeeEmails}}')],
            dict(DONATION, attendeeEmails=['a@example.com', 'b@example.com']),
        )

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(mail.outbox[0].to, ['a@example.com', 'b@example.com'])

    def test_sms_without_gateway_is_dry_run(self):
        run = self.execute([{
            'id': 'step1',
            'action': {
                'type': 'send_sms',
                'config': {'to': '+15551234567', 'message': 'Hi {{donorName}}'},
            },
        }])

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(run.steps[0]['output'], {'dryRun': True, 'to': '+15551234567'})

    def test_sms_invalid_number(self):
        run = self.execute([{
            'id': 'step1',
            'action': {'type': 'send_sms', 'config': {'to': '{{volunteerPhone}}', 'message': 'Hi'}},
        }])

        self.assertEqual(run.error, 'Step 1 failed: Invalid phone number')

    @patch('automations.services.executors.requests.post')
    def test_sms_through_gateway(self, mock_post):
        mock_post.return_value = Mock(status_code=201)

        with override_settings(AUTOMATIONS={
            **settings.AUTOMATIONS,
            'SMS_GATEWAY_URL': 'https://sms.example.com/messages',
            'SMS_API_KEY': 'key-123',
            'SMS_FROM_NUMBER': '+15550000000',
        }):
            run = self.execute([{
                'id': 'step1',
                'action': {'type': 'send_sms', 'config': {'to': '+15551234567', 'message': 'Hi {{donorName}}'}},
            }])

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://sms.example.com/messages')
        self.assertEqual(kwargs['json']['message'], 'Hi John Smith')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer key-123')

    def test_slack_without_webhook_is_dry_run(self):
        run = self.execute([slack_step('step1')])

        self.assertEqual(run.steps[0]['output'], {'dryRun': True, 'channel': '#donations'})

    @patch('automations.services.executors.requests.post')
    def test_slack_delivery_failure(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('connection refused')

        with override_settings(AUTOMATIONS={
            **settings.AUTOMATIONS,
            'SLACK_WEBHOOK_URL': 'https://hooks.slack.com/services/T000/B000/XXXX',
        }):
            run = self.execute([slack_step('step1')])

        self.assertEqual(run.status, AutomationRun.Status.FAILED)
        self.assertEqual(run.error, 'Step 1 failed: Slack delivery failed: connection refused')

    @patch('automations.services.executors.requests.request')
    def test_webhook_posts_rendered_json(self, mock_request):
        mock_request.return_value = Mock(status_code=200)

        run = self.execute([{
            'id': 'step1',
            'action': {
                'type': 'send_webhook',
                'config': {
                    'url': 'https://crm.example.com/hooks/donations',
                    'method': 'POST',
                    'body': '{"donation": "{{donationId}}"}',
                },
            },
        }])

        self.assertEqual(run.status, AutomationRun.Status.COMPLETED)
        self.assertEqual(run.steps[0]['output'], {'statusCode': 200})
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', 'https://crm.example.com/hooks/donations'))
        self.assertEqual(kwargs['json'], {'donation': 'don_123'})

    def test_webhook_invalid_url(self):
        run = self.execute([{
            'id': 'step1',
            'action': {'type': 'send_webhook', 'config': {'url': 'not a url', 'method': 'POST'}},
        }])

        self.assertEqual(run.error, 'Step 1 failed: Invalid webhook URL')

    def test_create_task(self):
        run = self.execute([{
            'id': 'step1',
            'action': {
                'type': 'create_task',
                'config': {
                    'title': 'Send handwritten thank you to {{donorName}}',
                    'dueIn': 3,
                    'priority': 'high',
                },
            },
        }])

        task = FollowUpTask.objects.get()
        self.assertEqual(task.title, 'Send handwritten thank you to John Smith')
        self.assertEqual(task.priority, 'high')
        self.assertEqual(task.automation_run_id, run.id)
        self.assertEqual(run.steps[0]['output']['taskId'], task.id)
        self.assertEqual(run.steps[0]['output']['dueDate'], task.due_date.isoformat())

    def test_remove_from_list(self):
        MailingListMembership.objects.create(list_id='newsletter', email='john@example.com')

        run = self.execute([{
            'id': 'step1',
            'action': {'type': 'remove_from_list', 'config': {'email': '{{donorEmail}}', 'listId': 'newsletter'}},
        }])

        self.assertEqual(run.steps[0]['output']['removed'], True)
        self.assertFalse(MailingListMembership.objects.exists())


class RecordingHandler(logging.Handler):

    def __init__(self, output):
        super().__init__()
        self.output = output

    def emit(self, record):
        self.output.append(self.format(record))


class ExecutorLoggingTest(TestCase):
    """Executor log events go through the stdlib handlers and their filters."""

    def setUp(self):
        self.output = []
        self.run = AutomationRunFactory()

        handler = RecordingHandler(self.output)
        handler.addFilter(SensitiveDataFilter())
        handler.setFormatter(StructuredFormatter())

        logger = logging.getLogger('automations.services.executors')
        self.addCleanup(logger.setLevel, logger.level)
        self.addCleanup(logger.removeHandler, handler)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    def test_sms_dry_run_log_is_masked(self):
        output = SmsExecutor().execute(
            {'to': '+1 217 555 0199', 'message': 'Hi jane@example.com'}, {}, self.run
        )

        self.assertTrue(output['dryRun'])
        self.assertEqual(len(self.output), 1)

        entry = json.loads(self.output[0])
        self.assertEqual(entry['message'], 'SMS gateway not configured, message not sent')
        self.assertEqual(entry['run_id'], self.run.id)
        self.assertEqual(entry['to'], '[PHONE]')
        self.assertEqual(entry['characters'], 19)
        self.assertNotIn('217 555 0199', self.output[0])
        self.assertNotIn('jane@example.com', self.output[0])

    def test_slack_dry_run_log_omits_message_text(self):
        SlackExecutor().execute(
            {'channel': '#volunteers', 'message': 'Call Jane at +1 217 555 0199'}, {}, self.run
        )

        entry = json.loads(self.output[0])
        self.assertEqual(entry['channel'], '#volunteers')
        self.assertNotIn('Jane', self.output[0])
        self.assertNotIn('217 555 0199', self.output[0])
