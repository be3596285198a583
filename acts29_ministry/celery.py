"""
Celery configuration for acts29_ministry.

This module configures Celery for background task processing including:
- Automation run execution
- Delayed continuation of runs after a delay step
- Scheduled automation triggers
"""

import os
from celery import Celery
from celery.schedules import crontab

# Set default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'acts29_ministry.settings')

# Create Celery app
app = Celery('acts29_ministry')

# Load config from Django settings with CELERY namespace
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()


# Celery Beat schedule for schedule.* triggers
app.conf.beat_schedule = {
    'dispatch-daily-automations': {
        'task': 'automations.tasks.dispatch_scheduled_automations',
        'schedule': crontab(minute=0),
        'args': ('schedule.daily',),
        'options': {'expires': 3000},
    },
    'dispatch-weekly-automations': {
        'task': 'automations.tasks.dispatch_scheduled_automations',
        'schedule': crontab(minute=0),
        'args': ('schedule.weekly',),
        'options': {'expires': 3000},
    },
    'dispatch-monthly-automations': {
        'task': 'automations.tasks.dispatch_scheduled_automations',
        'schedule': crontab(minute=0),
        'args': ('schedule.monthly',),
        'options': {'expires': 3000},
    },
}

# Celery configuration
app.conf.update(
    # Task settings
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,

    # Task execution settings
    task_track_started=True,
    task_time_limit=10 * 60,  # 10 minutes hard limit
    task_soft_time_limit=8 * 60,  # 8 minutes soft limit

    # Result backend settings
    result_expires=3600,  # Results expire after 1 hour

    # Worker settings
    worker_prefetch_multiplier=4,
    worker_max_tasks_per_child=1000,

    # Retry settings
    task_acks_late=True,  # Acknowledge tasks after completion
    task_reject_on_worker_lost=True,  # Reject lost tasks
)
