import automations.models
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Automation',
            fields=[
                ('id', models.CharField(default=automations.models.generate_automation_id, editable=False, max_length=40, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Display name of the automation', max_length=200)),
                ('description', models.TextField(blank=True, default='', help_text='What the automation does')),
                ('trigger', models.JSONField(default=dict, help_text='Trigger definition: {type, filters?, schedule?}')),
                ('trigger_type', models.CharField(db_index=True, editable=False, help_text='Copy of trigger.type for dispatch lookups', max_length=64)),
                ('steps', models.JSONField(default=list, help_text='Ordered steps: [{id, action, conditions?, onSuccess?, onFailure?}]')),
                ('is_active', models.BooleanField(default=True, help_text='Inactive automations are never dispatched')),
                ('run_count', models.PositiveIntegerField(default=0, help_text='Number of finished runs')),
                ('last_run_at', models.DateTimeField(blank=True, help_text='When the automation last finished a run', null=True)),
                ('template_id', models.CharField(blank=True, default='', help_text='Catalog template this automation was created from', max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Automation',
                'verbose_name_plural': 'Automations',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['is_active', 'trigger_type'], name='automation_active_trigger_idx')],
            },
        ),
        migrations.CreateModel(
            name='AutomationRun',
            fields=[
                ('id', models.CharField(default=automations.models.generate_run_id, editable=False, max_length=40, primary_key=True, serialize=False)),
                ('automation_name', models.CharField(help_text='Automation name at the time of the run', max_length=200)),
                ('triggered_by', models.CharField(help_text='Trigger type that started the run', max_length=64)),
                ('trigger_data', models.JSONField(blank=True, default=dict, help_text='Event payload the run was started with')),
                ('source', models.CharField(choices=[('manual', 'Manual'), ('webhook', 'Webhook'), ('scheduled', 'Scheduled'), ('system', 'System')], default='system', max_length=20)),
                ('status', models.CharField(choices=[('running', 'Running'), ('completed', 'Completed'), ('failed', 'Failed'), ('cancelled', 'Cancelled')], db_index=True, default='running', max_length=20)),
                ('steps', models.JSONField(blank=True, default=list, help_text='Per-step results in step order')),
                ('started_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('duration', models.PositiveIntegerField(blank=True, help_text='Run duration in milliseconds', null=True)),
                ('error', models.TextField(blank=True, default='')),
                ('automation', models.ForeignKey(help_text='Automation that was executed', on_delete=django.db.models.deletion.CASCADE, related_name='runs', to='automations.automation')),
            ],
            options={
                'verbose_name': 'Automation run',
                'verbose_name_plural': 'Automation runs',
                'ordering': ['-started_at'],
                'indexes': [models.Index(fields=['automation', '-started_at'], name='run_automation_started_idx')],
            },
        ),
        migrations.CreateModel(
            name='FollowUpTask',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('assign_to', models.CharField(blank=True, default='', help_text='User ID or email of the assignee', max_length=255)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], default='medium', max_length=10)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('open', 'Open'), ('done', 'Done')], default='open', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('automation_run', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tasks', to='automations.automationrun')),
            ],
            options={
                'ordering': ['due_date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='MailingListMembership',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('list_id', models.CharField(db_index=True, max_length=100)),
                ('email', models.EmailField(max_length=254)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('added_by_run', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='list_memberships', to='automations.automationrun')),
            ],
            options={
                'ordering': ['list_id', 'email'],
                'constraints': [models.UniqueConstraint(fields=('list_id', 'email'), name='unique_list_membership')],
            },
        ),
    ]
