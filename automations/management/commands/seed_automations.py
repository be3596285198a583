"""
Management command to load the sample automations and run history.

Safe to run repeatedly: records are matched on their ids.
"""
from datetime import datetime, timezone as dt_timezone

from django.core.management.base import BaseCommand
from django.db import transaction

from automations.models import Automation, AutomationRun


def utc(value):
    return datetime.fromisoformat(value).replace(tzinfo=dt_timezone.utc)


SAMPLE_AUTOMATIONS = [
    {
        'id': 'auto_1',
        'name': 'Welcome New Donor',
        'description': 'Send a thank you email and add to donor list when someone makes their first donation',
        'trigger': {'type': 'donation.created'},
        'steps': [
            {
                'id': 'step1',
                'action': {
                    'type': 'send_email',
                    'config': {
                        'to': '{{donorEmail}}',
                        'subject': 'Thank you for your generous gift!',
                        'templateId': 'donation_receipt',
                    },
                },
            },
            {
                'id': 'step2',
                'action': {
                    'type': 'add_to_list',
                    'config': {
                        'email': '{{donorEmail}}',
                        'listId': 'donor-updates',
                    },
                },
            },
        ],
        'is_active': True,
        'run_count': 47,
        'last_run_at': utc('2024-12-23T00:00:00'),
        'created_at': utc('2024-01-01T00:00:00'),
        'updated_at': utc('2024-01-01T00:00:00'),
    },
    {
        'id': 'auto_2',
        'name': 'Volunteer Shift Reminder',
        'description': 'Send SMS and email reminders 24 hours before a scheduled shift',
        'trigger': {
            'type': 'volunteer.shift_upcoming',
            'filters': {'hoursUntilShift': 24},
        },
        'steps': [
            {
                'id': 'step1',
                'action': {
                    'type': 'send_email',
                    'config': {
                        'to': '{{volunteerEmail}}',
                        'subject': 'Reminder: Your shift tomorrow',
                        'templateId': 'event_reminder',
                    },
                },
            },
            {
                'id': 'step2',
                'action': {
                    'type': 'send_sms',
                    'config': {
                        'to': '{{volunteerPhone}}',
                        'message': 'Hi {{volunteerName}}! Reminder: {{shiftTitle}} tomorrow at {{shiftTime}}.',
                    },
                },
                'conditions': [{'field': 'volunteerPhone', 'operator': 'is_not_empty', 'value': None}],
            },
        ],
        'is_active': True,
        'run_count': 156,
        'last_run_at': utc('2024-12-24T00:00:00'),
        'created_at': utc('2024-01-15T00:00:00'),
        'updated_at': utc('2024-02-10T00:00:00'),
    },
    {
        'id': 'auto_3',
        'name': 'Urgent Case Alert',
        'description': 'Immediately notify team via Slack when an urgent case is created',
        'trigger': {
            'type': 'case.created',
            'filters': {'priority': 'urgent'},
        },
        'steps': [
            {
                'id': 'step1',
                'action': {
                    'type': 'send_slack',
                    'config': {
                        'channel': '#urgent-cases',
                        'message': '🚨 URGENT CASE: {{clientName}} needs immediate assistance.',
                    },
                },
            },
        ],
        'is_active': True,
        'run_count': 12,
        'last_run_at': utc('2024-12-20T00:00:00'),
        'created_at': utc('2024-03-01T00:00:00'),
        'updated_at': utc('2024-03-01T00:00:00'),
    },
]

SAMPLE_RUNS = [
    {
        'id': 'run_1',
        'automation_id': 'auto_1',
        'automation_name': 'Welcome New Donor',
        'triggered_by': 'donation.created',
        'trigger_data': {
            'donationId': 'don_123',
            'amount': 5000,
            'donorEmail': 'john@example.com',
            'donorName': 'John Smith',
        },
        'source': AutomationRun.Source.WEBHOOK,
        'status': AutomationRun.Status.COMPLETED,
        'steps': [
            {
                'stepId': 'step1',
                'action': 'send_email',
                'status': 'completed',
                'startedAt': '2024-12-24T10:00:00Z',
                'completedAt': '2024-12-24T10:00:02Z',
                'output': {'emailId': 'email_abc123'},
            },
            {
                'stepId': 'step2',
                'action': 'add_to_list',
                'status': 'completed',
                'startedAt': '2024-12-24T10:00:02Z',
                'completedAt': '2024-12-24T10:00:03Z',
            },
        ],
        'started_at': utc('2024-12-24T10:00:00'),
        'completed_at': utc('2024-12-24T10:00:03'),
        'duration': 3000,
        'error': '',
    },
    {
        'id': 'run_2',
        'automation_id': 'auto_2',
        'automation_name': 'Volunteer Shift Reminder',
        'triggered_by': 'volunteer.shift_upcoming',
        'trigger_data': {
            'volunteerId': 'vol_456',
            'volunteerName': 'Jane Doe',
            'volunteerEmail': 'jane@example.com',
            'volunteerPhone': '+15551234567',
            'shiftTitle': 'Food Distribution',
            'shiftDate': '2024-12-25',
            'shiftTime': '9:00 AM',
        },
        'source': AutomationRun.Source.SYSTEM,
        'status': AutomationRun.Status.COMPLETED,
        'steps': [
            {
                'stepId': 'step1',
                'action': 'send_email',
                'status': 'completed',
                'startedAt': '2024-12-24T09:00:00Z',
                'completedAt': '2024-12-24T09:00:01Z',
            },
            {
                'stepId': 'step2',
                'action': 'send_sms',
                'status': 'completed',
                'startedAt': '2024-12-24T09:00:01Z',
                'completedAt': '2024-12-24T09:00:02Z',
            },
        ],
        'started_at': utc('2024-12-24T09:00:00'),
        'completed_at': utc('2024-12-24T09:00:02'),
        'duration': 2000,
        'error': '',
    },
    {
        'id': 'run_3',
        'automation_id': 'auto_1',
        'automation_name': 'Welcome New Donor',
        'triggered_by': 'donation.created',
        'trigger_data': {
            'donationId': 'don_789',
            'amount': 10000,
            'donorEmail': 'invalid-email',
            'donorName': 'Test User',
        },
        'source': AutomationRun.Source.WEBHOOK,
        'status': AutomationRun.Status.FAILED,
        'steps': [
            {
                'stepId': 'step1',
                'action': 'send_email',
                'status': 'failed',
                'startedAt': '2024-12-23T15:30:00Z',
                'completedAt': '2024-12-23T15:30:01Z',
                'error': 'Invalid email address',
            },
            {
                'stepId': 'step2',
                'action': 'add_to_list',
                'status': 'skipped',
            },
        ],
        'started_at': utc('2024-12-23T15:30:00'),
        'completed_at': utc('2024-12-23T15:30:01'),
        'duration': 1000,
        'error': 'Step 1 failed: Invalid email address',
    },
]


class Command(BaseCommand):
    help = 'Load the sample automations and their run history'

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-runs',
            action='store_true',
            help='Only load automations, not run history',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding automations...')

        for sample in SAMPLE_AUTOMATIONS:
            defaults = dict(sample)
            automation_id = defaults.pop('id')
            timestamps = {
                'created_at': defaults.pop('created_at'),
                'updated_at': defaults.pop('updated_at'),
            }
            automation, created = Automation.objects.update_or_create(
                id=automation_id, defaults=defaults)
            # auto_now fields are only bypassed by a queryset update
            Automation.objects.filter(pk=automation.pk).update(**timestamps)
            self.stdout.write(f"  {'Created' if created else 'Updated'} {automation.id}: {automation.name}")

        if options['skip_runs']:
            self.stdout.write(self.style.SUCCESS('\nAutomations seeded (run history skipped).'))
            return

        self.stdout.write('\nSeeding run history...')
        for sample in SAMPLE_RUNS:
            defaults = dict(sample)
            run_id = defaults.pop('id')
            run, created = AutomationRun.objects.update_or_create(id=run_id, defaults=defaults)
            self.stdout.write(f"  {'Created' if created else 'Updated'} {run.id} ({run.status})")

        self.stdout.write(self.style.SUCCESS(
            f'\nSeeded {len(SAMPLE_AUTOMATIONS)} automations and {len(SAMPLE_RUNS)} runs.'))
