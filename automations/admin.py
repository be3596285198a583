"""
Admin configuration for Automations app.
"""

from django.contrib import admin
from .models import Automation, AutomationRun, FollowUpTask, MailingListMembership


class AutomationRunInline(admin.TabularInline):
    """Inline admin for the latest runs of an automation."""
    model = AutomationRun
    extra = 0
    fields = ('id', 'status', 'source', 'started_at', 'completed_at', 'duration')
    readonly_fields = fields
    show_change_link = True
    can_delete = False


@admin.register(Automation)
class AutomationAdmin(admin.ModelAdmin):
    """Admin interface for Automation model."""

    list_display = (
        'name',
        'trigger_type',
        'is_active',
        'run_count',
        'last_run_at',
        'template_id',
        'created_at',
    )

    list_filter = (
        'is_active',
        'trigger_type',
        'created_at',
    )

    search_fields = (
        'id',
        'name',
        'description',
        'template_id',
    )

    readonly_fields = (
        'id',
        'trigger_type',
        'run_count',
        'last_run_at',
        'created_at',
        'updated_at',
    )

    fieldsets = (
        ('Basic Information', {
            'fields': (
                'id',
                'name',
                'description',
                'is_active',
                'template_id',
            )
        }),
        ('Definition', {
            'fields': (
                'trigger',
                'trigger_type',
                'steps',
            )
        }),
        ('Statistics', {
            'fields': (
                'run_count',
                'last_run_at',
                'created_at',
                'updated_at',
            ),
            'classes': ('collapse',)
        }),
    )

    inlines = [AutomationRunInline]


@admin.register(AutomationRun)
class AutomationRunAdmin(admin.ModelAdmin):
    """Admin interface for AutomationRun model."""

    list_display = (
        'id',
        'automation_name',
        'triggered_by',
        'source',
        'status',
        'duration',
        'started_at',
    )

    list_filter = (
        'status',
        'source',
        'started_at',
    )

    search_fields = (
        'id',
        'automation__id',
        'automation_name',
        'triggered_by',
    )

    readonly_fields = (
        'id',
        'automation',
        'automation_name',
        'triggered_by',
        'trigger_data',
        'source',
        'status',
        'steps',
        'started_at',
        'completed_at',
        'duration',
        'error',
    )

    date_hierarchy = 'started_at'

    def has_add_permission(self, request):
        return False


@admin.register(MailingListMembership)
class MailingListMembershipAdmin(admin.ModelAdmin):
    """Admin interface for MailingListMembership model."""

    list_display = ('email', 'list_id', 'added_by_run', 'created_at')
    list_filter = ('list_id',)
    search_fields = ('email',)
    raw_id_fields = ('added_by_run',)


@admin.register(FollowUpTask)
class FollowUpTaskAdmin(admin.ModelAdmin):
    """Admin interface for FollowUpTask model."""

    list_display = ('title', 'assign_to', 'priority', 'status', 'due_date', 'created_at')
    list_filter = ('priority', 'status', 'due_date')
    search_fields = ('title', 'description', 'assign_to')
    raw_id_fields = ('automation_run',)
