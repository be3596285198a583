"""
Trigger and action definitions for automations.

Each trigger type describes the data its payload carries and the filters an
automation may set on it. Each action type describes the config fields its
step accepts. The definitions drive the automation builder UI and the
validation of automations before they are saved.
"""

from collections import OrderedDict

from django.db import models
from django.utils.translation import gettext_lazy as _


class TriggerType(models.TextChoices):
    DONATION_CREATED = 'donation.created', _('New Donation')
    DONATION_RECURRING_CREATED = 'donation.recurring.created', _('New Recurring Donation')
    DONATION_RECURRING_CANCELLED = 'donation.recurring.cancelled', _('Recurring Donation Cancelled')
    DONATION_FAILED = 'donation.failed', _('Donation Failed')
    VOLUNTEER_SIGNED_UP = 'volunteer.signed_up', _('New Volunteer Signup')
    VOLUNTEER_SHIFT_ASSIGNED = 'volunteer.shift_assigned', _('Shift Assigned')
    VOLUNTEER_SHIFT_COMPLETED = 'volunteer.shift_completed', _('Shift Completed')
    VOLUNTEER_SHIFT_UPCOMING = 'volunteer.shift_upcoming', _('Upcoming Shift Reminder')
    EVENT_CREATED = 'event.created', _('New Event Created')
    EVENT_REGISTRATION = 'event.registration', _('Event Registration')
    EVENT_REMINDER = 'event.reminder', _('Event Reminder')
    EVENT_CANCELLED = 'event.cancelled', _('Event Cancelled')
    CASE_CREATED = 'case.created', _('New Case Created')
    CASE_STATUS_CHANGED = 'case.status_changed', _('Case Status Changed')
    CASE_ASSIGNED = 'case.assigned', _('Case Assigned')
    PRAYER_SUBMITTED = 'prayer.submitted', _('Prayer Request Submitted')
    PRAYER_ANSWERED = 'prayer.answered', _('Prayer Marked Answered')
    NEWSLETTER_SUBSCRIBED = 'newsletter.subscribed', _('Newsletter Subscription')
    NEWSLETTER_UNSUBSCRIBED = 'newsletter.unsubscribed', _('Newsletter Unsubscription')
    SCHEDULE_DAILY = 'schedule.daily', _('Daily Schedule')
    SCHEDULE_WEEKLY = 'schedule.weekly', _('Weekly Schedule')
    SCHEDULE_MONTHLY = 'schedule.monthly', _('Monthly Schedule')
    WEBHOOK_RECEIVED = 'webhook.received', _('Webhook Received')


class ActionType(models.TextChoices):
    SEND_EMAIL = 'send_email', _('Send Email')
    SEND_SMS = 'send_sms', _('Send SMS')
    SEND_SLACK = 'send_slack', _('Send Slack Message')
    SEND_WEBHOOK = 'send_webhook', _('Send Webhook')
    CREATE_TASK = 'create_task', _('Create Task')
    UPDATE_RECORD = 'update_record', _('Update Record')
    ADD_TO_LIST = 'add_to_list', _('Add to List')
    REMOVE_FROM_LIST = 'remove_from_list', _('Remove from List')
    DELAY = 'delay', _('Delay')
    CONDITION = 'condition', _('Condition')
    SEND_PUSH_NOTIFICATION = 'send_push_notification', _('Send Push Notification')


SCHEDULE_TRIGGERS = (
    TriggerType.SCHEDULE_DAILY,
    TriggerType.SCHEDULE_WEEKLY,
    TriggerType.SCHEDULE_MONTHLY,
)

CONDITION_OPERATORS = (
    'equals',
    'not_equals',
    'contains',
    'greater_than',
    'less_than',
    'is_empty',
    'is_not_empty',
)

MAILING_LISTS = [
    {'value': 'newsletter', 'label': 'Newsletter'},
    {'value': 'donor-updates', 'label': 'Donor Updates'},
    {'value': 'event-reminders', 'label': 'Event Reminders'},
    {'value': 'volunteers', 'label': 'Volunteers'},
]


def _filter(field, label, type, options=None):
    definition = {'field': field, 'label': label, 'type': type}
    if options:
        definition['options'] = options
    return definition


def _field(field, label, type, required=False, **extra):
    definition = {'field': field, 'label': label, 'type': type, 'required': required}
    definition.update(extra)
    return definition


# ============================================================================
# TRIGGERS
# ============================================================================

TRIGGER_DEFINITIONS = OrderedDict([
    (TriggerType.DONATION_CREATED, {
        'name': 'New Donation',
        'description': 'Triggers when a new donation is received',
        'category': 'Donations',
        'data_fields': ['donationId', 'amount', 'donorEmail', 'donorName', 'paymentMethod', 'isRecurring'],
        'filters': [
            _filter('amount', 'Amount (cents)', 'number'),
            _filter('paymentMethod', 'Payment Method', 'select', ['card', 'ach']),
            _filter('isRecurring', 'Is Recurring', 'boolean'),
        ],
    }),
    (TriggerType.DONATION_RECURRING_CREATED, {
        'name': 'New Recurring Donation',
        'description': 'Triggers when a recurring donation subscription is set up',
        'category': 'Donations',
        'data_fields': ['subscriptionId', 'amount', 'interval', 'donorEmail', 'donorName'],
        'filters': [
            _filter('amount', 'Amount (cents)', 'number'),
            _filter('interval', 'Interval', 'select', ['weekly', 'monthly', 'quarterly', 'yearly']),
        ],
    }),
    (TriggerType.DONATION_RECURRING_CANCELLED, {
        'name': 'Recurring Donation Cancelled',
        'description': 'Triggers when a recurring donation is cancelled',
        'category': 'Donations',
        'data_fields': ['subscriptionId', 'donorEmail', 'donorName', 'reason'],
        'filters': [],
    }),
    (TriggerType.DONATION_FAILED, {
        'name': 'Donation Failed',
        'description': 'Triggers when a donation payment fails',
        'category': 'Donations',
        'data_fields': ['donationId', 'donorEmail', 'failureReason'],
        'filters': [],
    }),
    (TriggerType.VOLUNTEER_SIGNED_UP, {
        'name': 'New Volunteer Signup',
        'description': 'Triggers when someone signs up to volunteer',
        'category': 'Volunteers',
        'data_fields': ['volunteerId', 'name', 'email', 'phone', 'interests'],
        'filters': [],
    }),
    (TriggerType.VOLUNTEER_SHIFT_ASSIGNED, {
        'name': 'Shift Assigned',
        'description': 'Triggers when a volunteer is assigned to a shift',
        'category': 'Volunteers',
        'data_fields': [
            'volunteerId', 'volunteerName', 'volunteerEmail', 'shiftId',
            'shiftTitle', 'shiftDate', 'shiftTime', 'shiftLocation',
        ],
        'filters': [],
    }),
    (TriggerType.VOLUNTEER_SHIFT_COMPLETED, {
        'name': 'Shift Completed',
        'description': 'Triggers when a volunteer completes a shift',
        'category': 'Volunteers',
        'data_fields': ['volunteerId', 'volunteerName', 'volunteerEmail', 'shiftId', 'hoursWorked'],
        'filters': [
            _filter('hoursWorked', 'Hours Worked', 'number'),
        ],
    }),
    (TriggerType.VOLUNTEER_SHIFT_UPCOMING, {
        'name': 'Upcoming Shift Reminder',
        'description': 'Triggers before a scheduled shift (configurable time)',
        'category': 'Volunteers',
        'data_fields': [
            'volunteerId', 'volunteerName', 'volunteerEmail', 'volunteerPhone',
            'shiftId', 'shiftTitle', 'shiftDate', 'shiftTime', 'shiftLocation',
            'hoursUntilShift',
        ],
        'filters': [
            _filter('hoursUntilShift', 'Hours Before Shift', 'number'),
        ],
    }),
    (TriggerType.EVENT_CREATED, {
        'name': 'New Event Created',
        'description': 'Triggers when a new event is created',
        'category': 'Events',
        'data_fields': ['eventId', 'title', 'date', 'location', 'isPublic'],
        'filters': [
            _filter('isPublic', 'Is Public', 'boolean'),
        ],
    }),
    (TriggerType.EVENT_REGISTRATION, {
        'name': 'Event Registration',
        'description': 'Triggers when someone registers for an event',
        'category': 'Events',
        'data_fields': ['eventId', 'eventTitle', 'eventDate', 'attendeeName', 'attendeeEmail'],
        'filters': [],
    }),
    (TriggerType.EVENT_REMINDER, {
        'name': 'Event Reminder',
        'description': 'Triggers before an event (configurable time)',
        'category': 'Events',
        'data_fields': ['eventId', 'eventTitle', 'eventDate', 'eventLocation', 'attendees'],
        'filters': [],
    }),
    (TriggerType.EVENT_CANCELLED, {
        'name': 'Event Cancelled',
        'description': 'Triggers when an event is cancelled',
        'category': 'Events',
        'data_fields': ['eventId', 'eventTitle', 'eventDate', 'reason', 'attendeeEmails'],
        'filters': [],
    }),
    (TriggerType.CASE_CREATED, {
        'name': 'New Case Created',
        'description': 'Triggers when a new case is created',
        'category': 'Cases',
        'data_fields': ['caseId', 'clientName', 'priority', 'needs'],
        'filters': [
            _filter('priority', 'Priority', 'select', ['low', 'medium', 'high', 'urgent']),
        ],
    }),
    (TriggerType.CASE_STATUS_CHANGED, {
        'name': 'Case Status Changed',
        'description': 'Triggers when a case status is updated',
        'category': 'Cases',
        'data_fields': ['caseId', 'clientName', 'previousStatus', 'newStatus'],
        'filters': [
            _filter('newStatus', 'New Status', 'string'),
        ],
    }),
    (TriggerType.CASE_ASSIGNED, {
        'name': 'Case Assigned',
        'description': 'Triggers when a case is assigned to a team member',
        'category': 'Cases',
        'data_fields': ['caseId', 'clientName', 'assignedToId', 'assignedToName', 'assignedToEmail'],
        'filters': [],
    }),
    (TriggerType.PRAYER_SUBMITTED, {
        'name': 'Prayer Request Submitted',
        'description': 'Triggers when a new prayer request is submitted',
        'category': 'Prayer',
        'data_fields': ['prayerId', 'requesterName', 'requesterEmail', 'request', 'isAnonymous'],
        'filters': [
            _filter('isAnonymous', 'Is Anonymous', 'boolean'),
        ],
    }),
    (TriggerType.PRAYER_ANSWERED, {
        'name': 'Prayer Marked Answered',
        'description': 'Triggers when a prayer request is marked as answered',
        'category': 'Prayer',
        'data_fields': ['prayerId', 'requesterName', 'requesterEmail'],
        'filters': [],
    }),
    (TriggerType.NEWSLETTER_SUBSCRIBED, {
        'name': 'Newsletter Subscription',
        'description': 'Triggers when someone subscribes to the newsletter',
        'category': 'Marketing',
        'data_fields': ['subscriberId', 'email', 'name', 'lists'],
        'filters': [],
    }),
    (TriggerType.NEWSLETTER_UNSUBSCRIBED, {
        'name': 'Newsletter Unsubscription',
        'description': 'Triggers when someone unsubscribes from the newsletter',
        'category': 'Marketing',
        'data_fields': ['email', 'lists'],
        'filters': [],
    }),
    (TriggerType.SCHEDULE_DAILY, {
        'name': 'Daily Schedule',
        'description': 'Triggers at a specific time every day',
        'category': 'Schedule',
        'data_fields': ['timestamp'],
        'filters': [],
    }),
    (TriggerType.SCHEDULE_WEEKLY, {
        'name': 'Weekly Schedule',
        'description': 'Triggers at a specific time on a specific day each week',
        'category': 'Schedule',
        'data_fields': ['timestamp', 'dayOfWeek'],
        'filters': [],
    }),
    (TriggerType.SCHEDULE_MONTHLY, {
        'name': 'Monthly Schedule',
        'description': 'Triggers at a specific time on a specific day each month',
        'category': 'Schedule',
        'data_fields': ['timestamp', 'dayOfMonth'],
        'filters': [],
    }),
    (TriggerType.WEBHOOK_RECEIVED, {
        'name': 'Webhook Received',
        'description': 'Triggers when a webhook is received from an external service',
        'category': 'Integrations',
        'data_fields': ['source', 'payload'],
        'filters': [
            _filter('source', 'Source', 'string'),
        ],
    }),
])


# ============================================================================
# ACTIONS
# ============================================================================

ACTION_DEFINITIONS = OrderedDict([
    (ActionType.SEND_EMAIL, {
        'name': 'Send Email',
        'description': 'Send an email to one or more recipients',
        'category': 'Communication',
        'fields': [
            _field('to', 'To', 'text', required=True, placeholder='{{donorEmail}}',
                   helpText='Use {{variable}} for dynamic values'),
            _field('subject', 'Subject', 'text', required=True),
            _field('templateId', 'Email Template', 'select', options=[
                {'value': 'donation_receipt', 'label': 'Donation Receipt'},
                {'value': 'welcome', 'label': 'Welcome Email'},
                {'value': 'event_reminder', 'label': 'Event Reminder'},
                {'value': 'custom', 'label': 'Custom Message'},
            ]),
            _field('body', 'Message Body', 'template', helpText='Use {{variable}} for dynamic values'),
            _field('replyTo', 'Reply To', 'email'),
        ],
    }),
    (ActionType.SEND_SMS, {
        'name': 'Send SMS',
        'description': 'Send an SMS message',
        'category': 'Communication',
        'fields': [
            _field('to', 'Phone Number', 'text', required=True, placeholder='{{volunteerPhone}}'),
            _field('message', 'Message', 'textarea', required=True,
                   helpText='Max 160 characters for single SMS'),
        ],
    }),
    (ActionType.SEND_SLACK, {
        'name': 'Send Slack Message',
        'description': 'Send a message to a Slack channel or user',
        'category': 'Communication',
        'fields': [
            _field('channel', 'Channel', 'text', required=True, placeholder='#general or @username'),
            _field('message', 'Message', 'textarea', required=True),
        ],
    }),
    (ActionType.SEND_WEBHOOK, {
        'name': 'Send Webhook',
        'description': 'Send data to an external URL',
        'category': 'Integrations',
        'fields': [
            _field('url', 'Webhook URL', 'text', required=True),
            _field('method', 'HTTP Method', 'select', required=True, options=[
                {'value': 'POST', 'label': 'POST'},
                {'value': 'GET', 'label': 'GET'},
                {'value': 'PUT', 'label': 'PUT'},
                {'value': 'PATCH', 'label': 'PATCH'},
            ]),
            _field('body', 'Request Body (JSON)', 'textarea', helpText='Use {{variable}} for dynamic values'),
        ],
    }),
    (ActionType.CREATE_TASK, {
        'name': 'Create Task',
        'description': 'Create a follow-up task for the team',
        'category': 'Tasks',
        'fields': [
            _field('title', 'Task Title', 'text', required=True),
            _field('description', 'Description', 'textarea'),
            _field('assignTo', 'Assign To', 'text', placeholder='User ID or email'),
            _field('dueIn', 'Due In (days)', 'number'),
            _field('priority', 'Priority', 'select', options=[
                {'value': 'low', 'label': 'Low'},
                {'value': 'medium', 'label': 'Medium'},
                {'value': 'high', 'label': 'High'},
            ]),
        ],
    }),
    (ActionType.UPDATE_RECORD, {
        'name': 'Update Record',
        'description': 'Update a database record',
        'category': 'Data',
        'fields': [
            _field('recordType', 'Record Type', 'select', required=True, options=[
                {'value': 'donor', 'label': 'Donor'},
                {'value': 'volunteer', 'label': 'Volunteer'},
                {'value': 'case', 'label': 'Case'},
                {'value': 'event', 'label': 'Event'},
            ]),
            _field('recordId', 'Record ID', 'text', required=True, placeholder='{{donorId}}'),
        ],
    }),
    (ActionType.ADD_TO_LIST, {
        'name': 'Add to List',
        'description': 'Add a contact to a mailing list or segment',
        'category': 'Marketing',
        'fields': [
            _field('email', 'Email', 'text', required=True, placeholder='{{donorEmail}}'),
            _field('listId', 'List', 'select', required=True, options=MAILING_LISTS),
        ],
    }),
    (ActionType.REMOVE_FROM_LIST, {
        'name': 'Remove from List',
        'description': 'Remove a contact from a mailing list',
        'category': 'Marketing',
        'fields': [
            _field('email', 'Email', 'text', required=True),
            _field('listId', 'List', 'select', required=True, options=MAILING_LISTS[:3]),
        ],
    }),
    (ActionType.DELAY, {
        'name': 'Delay',
        'description': 'Wait before executing the next step',
        'category': 'Flow Control',
        'fields': [
            _field('duration', 'Duration', 'number', required=True),
            _field('unit', 'Unit', 'select', required=True, options=[
                {'value': 'minutes', 'label': 'Minutes'},
                {'value': 'hours', 'label': 'Hours'},
                {'value': 'days', 'label': 'Days'},
            ]),
        ],
    }),
    (ActionType.CONDITION, {
        'name': 'Condition',
        'description': 'Branch based on a condition',
        'category': 'Flow Control',
        'fields': [
            _field('matchType', 'Match', 'select', required=True, options=[
                {'value': 'all', 'label': 'All conditions (AND)'},
                {'value': 'any', 'label': 'Any condition (OR)'},
            ]),
        ],
    }),
    (ActionType.SEND_PUSH_NOTIFICATION, {
        'name': 'Send Push Notification',
        'description': 'Send a push notification to mobile app users',
        'category': 'Communication',
        'fields': [
            _field('userId', 'User ID', 'text', required=True),
            _field('title', 'Title', 'text', required=True),
            _field('body', 'Message', 'textarea', required=True),
        ],
    }),
])


def is_known_trigger(trigger_type):
    return trigger_type in TriggerType.values


def is_known_action(action_type):
    return action_type in ActionType.values


def required_config_fields(action_type):
    """Names of the config fields a step of ``action_type`` must set."""
    definition = ACTION_DEFINITIONS.get(action_type)
    if definition is None:
        return []
    return [field['field'] for field in definition['fields'] if field['required']]


def triggers_by_category():
    """
    Trigger definitions grouped by category, in definition order.

    Returns:
        OrderedDict mapping category name to a list of
        ``{type, name, description, dataFields, availableFilters}``
    """
    grouped = OrderedDict()
    for trigger_type, definition in TRIGGER_DEFINITIONS.items():
        grouped.setdefault(definition['category'], []).append({
            'type': trigger_type.value,
            'name': definition['name'],
            'description': definition['description'],
            'dataFields': list(definition['data_fields']),
            'availableFilters': list(definition['filters']),
        })
    return grouped


def actions_by_category():
    """
    Action definitions grouped by category, in definition order.

    Returns:
        OrderedDict mapping category name to a list of
        ``{type, name, description, configFields}``
    """
    grouped = OrderedDict()
    for action_type, definition in ACTION_DEFINITIONS.items():
        grouped.setdefault(definition['category'], []).append({
            'type': action_type.value,
            'name': definition['name'],
            'description': definition['description'],
            'configFields': list(definition['fields']),
        })
    return grouped
