"""
Factory Boy factories for automations app testing.
"""

import factory
from factory.django import DjangoModelFactory
from django.contrib.auth import get_user_model

from automations.models import Automation, AutomationRun

User = get_user_model()


class UserFactory(DjangoModelFactory):
    """Factory for back-office staff users."""

    class Meta:
        model = User

    username = factory.Sequence(lambda n: f'staff{n}')
    email = factory.LazyAttribute(lambda obj: f'{obj.username}@acts29ministry.org')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    password = factory.PostGenerationMethodCall(
        'set_password', 'testpass123')  # nosec - test password
    is_active = True
    is_staff = True


def email_step(step_id='step1', to='{{donorEmail}}', **extra):
    step = {
        'id': step_id,
        'action': {
            'type': 'send_email',
            'config': {
                'to': to,
                'subject': 'Thank you {{donorName}}!',
                'body': 'Hi {{donorName}}, thank you for your gift of {{amount}}.',
            },
        },
    }
    step.update(extra)
    return step


def list_step(step_id='step2', list_id='donor-updates', **extra):
    step = {
        'id': step_id,
        'action': {
            'type': 'add_to_list',
            'config': {'email': '{{donorEmail}}', 'listId': list_id},
        },
    }
    step.update(extra)
    return step


class AutomationFactory(DjangoModelFactory):
    """Factory for Automation model; a donation welcome flow by default."""

    class Meta:
        model = Automation

    name = factory.Sequence(lambda n: f'Welcome Donor {n}')
    description = factory.Faker('sentence')
    trigger = factory.LazyFunction(lambda: {'type': 'donation.created'})
    steps = factory.LazyFunction(lambda: [email_step(), list_step()])
    is_active = True


class AutomationRunFactory(DjangoModelFactory):
    """Factory for AutomationRun model."""

    class Meta:
        model = AutomationRun

    automation = factory.SubFactory(AutomationFactory)
    automation_name = factory.LazyAttribute(lambda obj: obj.automation.name)
    triggered_by = factory.LazyAttribute(lambda obj: obj.automation.trigger_type)
    trigger_data = factory.LazyFunction(lambda: {
        'donorEmail': 'john@example.com',
        'donorName': 'John Smith',
        'amount': 5000,
    })
    source = AutomationRun.Source.SYSTEM
    status = AutomationRun.Status.COMPLETED
    steps = factory.LazyFunction(list)
    duration = 1000
