"""
Automation models for Acts 29 Ministry.

This module contains:
- Automation (a trigger plus ordered steps, built by staff or from a template)
- AutomationRun (one execution of an automation with per-step results)
- MailingListMembership (written by add_to_list / remove_from_list steps)
- FollowUpTask (written by create_task steps)
"""

import uuid
from django.db import models
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .catalog import Step, Trigger
from .definitions import TriggerType


def generate_automation_id():
    return f"auto_{uuid.uuid4().hex[:12]}"


def generate_run_id():
    return f"run_{uuid.uuid4().hex[:12]}"


class AutomationQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def for_trigger(self, trigger_type):
        return self.filter(trigger_type=trigger_type)


class Automation(models.Model):
    """
    A live automation.

    ``trigger`` and ``steps`` hold the JSON shapes the automation builder
    produces. ``trigger_type`` mirrors ``trigger['type']`` so dispatch can
    filter on an indexed column.
    """

    id = models.CharField(
        primary_key=True,
        max_length=40,
        default=generate_automation_id,
        editable=False
    )
    name = models.CharField(
        max_length=200,
        help_text=_('Display name of the automation')
    )
    description = models.TextField(
        blank=True,
        default='',
        help_text=_('What the automation does')
    )
    trigger = models.JSONField(
        default=dict,
        help_text=_('Trigger definition: {type, filters?, schedule?}')
    )
    trigger_type = models.CharField(
        max_length=64,
        db_index=True,
        editable=False,
        help_text=_('Copy of trigger.type for dispatch lookups')
    )
    steps = models.JSONField(
        default=list,
        help_text=_('Ordered steps: [{id, action, conditions?, onSuccess?, onFailure?}]')
    )
    is_active = models.BooleanField(
        default=True,
        help_text=_('Inactive automations are never dispatched')
    )
    run_count = models.PositiveIntegerField(
        default=0,
        help_text=_('Number of finished runs')
    )
    last_run_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text=_('When the automation last finished a run')
    )
    template_id = models.CharField(
        max_length=100,
        blank=True,
        default='',
        help_text=_('Catalog template this automation was created from')
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AutomationQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        verbose_name = _('Automation')
        verbose_name_plural = _('Automations')
        indexes = [
            models.Index(fields=['is_active', 'trigger_type'], name='automation_active_trigger_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.trigger_type})"

    def save(self, *args, **kwargs):
        self.trigger_type = (self.trigger or {}).get('type', '')
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'trigger' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'trigger_type'}
        super().save(*args, **kwargs)

    @property
    def is_scheduled(self):
        return self.trigger_type in TriggerType.values and self.trigger_type.startswith('schedule.')

    def get_trigger(self):
        return Trigger.from_dict(self.trigger)

    def get_steps(self):
        return [Step.from_dict(step) for step in self.steps]

    def record_run_finished(self, finished_at):
        """Bump run statistics without racing concurrent runs."""
        Automation.objects.filter(pk=self.pk).update(
            run_count=F('run_count') + 1,
            last_run_at=finished_at,
        )
        self.refresh_from_db(fields=['run_count', 'last_run_at'])


class AutomationRun(models.Model):
    """
    One execution of an automation.

    ``steps`` holds one result per automation step, in step order:
    ``{stepId, action, status, startedAt?, completedAt?, error?, output?}``.
    """

    class Source(models.TextChoices):
        MANUAL = 'manual', _('Manual')
        WEBHOOK = 'webhook', _('Webhook')
        SCHEDULED = 'scheduled', _('Scheduled')
        SYSTEM = 'system', _('System')

    class Status(models.TextChoices):
        RUNNING = 'running', _('Running')
        COMPLETED = 'completed', _('Completed')
        FAILED = 'failed', _('Failed')
        CANCELLED = 'cancelled', _('Cancelled')

    class StepStatus(models.TextChoices):
        PENDING = 'pending', _('Pending')
        RUNNING = 'running', _('Running')
        COMPLETED = 'completed', _('Completed')
        FAILED = 'failed', _('Failed')
        SKIPPED = 'skipped', _('Skipped')

    id = models.CharField(
        primary_key=True,
        max_length=40,
        default=generate_run_id,
        editable=False
    )
    automation = models.ForeignKey(
        Automation,
        on_delete=models.CASCADE,
        related_name='runs',
        help_text=_('Automation that was executed')
    )
    automation_name = models.CharField(
        max_length=200,
        help_text=_('Automation name at the time of the run')
    )
    triggered_by = models.CharField(
        max_length=64,
        help_text=_('Trigger type that started the run')
    )
    trigger_data = models.JSONField(
        default=dict,
        blank=True,
        help_text=_('Event payload the run was started with')
    )
    source = models.CharField(
        max_length=20,
        choices=Source.choices,
        default=Source.SYSTEM
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.RUNNING,
        db_index=True
    )
    steps = models.JSONField(
        default=list,
        blank=True,
        help_text=_('Per-step results in step order')
    )
    started_at = models.DateTimeField(default=timezone.now, db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    duration = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_('Run duration in milliseconds')
    )
    error = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['-started_at']
        verbose_name = _('Automation run')
        verbose_name_plural = _('Automation runs')
        indexes = [
            models.Index(fields=['automation', '-started_at'], name='run_automation_started_idx'),
        ]

    def __str__(self):
        return f"{self.id} {self.automation_name} [{self.status}]"

    @property
    def is_finished(self):
        return self.status != self.Status.RUNNING


class MailingListMembership(models.Model):
    """A contact's membership of a mailing list or segment."""

    list_id = models.CharField(max_length=100, db_index=True)
    email = models.EmailField()
    added_by_run = models.ForeignKey(
        AutomationRun,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='list_memberships'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['list_id', 'email']
        constraints = [
            models.UniqueConstraint(
                fields=['list_id', 'email'], name='unique_list_membership'),
        ]

    def __str__(self):
        return f"{self.email} in {self.list_id}"


class FollowUpTask(models.Model):
    """A follow-up task for the team, usually created by an automation."""

    PRIORITY_CHOICES = [
        ('low', _('Low')),
        ('medium', _('Medium')),
        ('high', _('High')),
    ]

    STATUS_CHOICES = [
        ('open', _('Open')),
        ('done', _('Done')),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    assign_to = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text=_('User ID or email of the assignee')
    )
    priority = models.CharField(
        max_length=10,
        choices=PRIORITY_CHOICES,
        default='medium'
    )
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=10,
        choices=STATUS_CHOICES,
        default='open'
    )
    automation_run = models.ForeignKey(
        AutomationRun,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tasks'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['due_date', '-created_at']

    def __str__(self):
        return self.title
