"""
Custom filters for automations app.
"""

import django_filters

from .models import Automation, AutomationRun


class AutomationFilter(django_filters.FilterSet):
    """
    Filter automations by state and trigger.

    Supports:
    - status (active | inactive)
    - trigger (trigger type, e.g. donation.created)
    """

    status = django_filters.ChoiceFilter(
        method='filter_status',
        choices=[
            ('active', 'Active'),
            ('inactive', 'Inactive'),
        ]
    )
    trigger = django_filters.CharFilter(field_name='trigger_type')

    class Meta:
        model = Automation
        fields = ['status', 'trigger']

    def filter_status(self, queryset, name, value):
        return queryset.filter(is_active=(value == 'active'))


class AutomationRunFilter(django_filters.FilterSet):
    """Filter run history by automation and run status."""

    automationId = django_filters.CharFilter(field_name='automation_id')
    status = django_filters.ChoiceFilter(choices=AutomationRun.Status.choices)

    class Meta:
        model = AutomationRun
        fields = ['automationId', 'status']
