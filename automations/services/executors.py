"""
Action executors for automation steps.

Every executor receives the step config with placeholders already rendered,
the raw trigger data and the run. It returns the step output as a dict or
raises ``ActionError``.

SMS and Slack executors need a gateway / webhook URL in
``settings.AUTOMATIONS``. Without one they log the message and report a dry
run instead of failing.
"""

import json
import re
import uuid
from datetime import timedelta

import requests
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.mail import EmailMessage
from django.core.validators import URLValidator, validate_email
from django.template import TemplateDoesNotExist
from django.template.loader import render_to_string
from django.utils import timezone

from ..conditions import evaluate_conditions
from ..definitions import ActionType
from ..exceptions import ActionError, UnsupportedActionError
from ..models import FollowUpTask, MailingListMembership

logger = structlog.get_logger(__name__)

PHONE_PATTERN = re.compile(r'^\+?[0-9][0-9 ().-]{6,19}$')

ORGANIZATION = {
    'name': 'Acts 29 Ministry',
    'address': '123 Ministry Lane, Springfield, IL 62701',
    'phone': '(217) 555-0129',
    'email': 'contact@acts29ministry.org',
    'website_url': 'https://acts29ministry.org',
}

DELAY_UNITS = {
    'minutes': 60,
    'hours': 60 * 60,
    'days': 24 * 60 * 60,
}


def automation_setting(name):
    return settings.AUTOMATIONS.get(name)


def split_recipients(value):
    """Split a rendered ``to`` value (``a@x.org, b@x.org``) into addresses."""
    return [address.strip() for address in str(value or '').split(',') if address.strip()]


def ensure_email(address):
    try:
        validate_email(address)
    except ValidationError:
        raise ActionError('Invalid email address')
    return address


class BaseExecutor:
    action_type = None

    def execute(self, config, data, run):
        raise NotImplementedError

    def require(self, config, name):
        value = config.get(name)
        if value in (None, ''):
            raise ActionError(f"Missing required field: {name}")
        return value


class EmailExecutor(BaseExecutor):
    """
    Send an e-mail through Django's mail backend.

    The body is either ``config['body']`` or a named template under
    ``automations/emails/<templateId>.txt`` rendered with the trigger data.
    """

    action_type = ActionType.SEND_EMAIL

    def execute(self, config, data, run):
        recipients = [ensure_email(address) for address in split_recipients(config.get('to'))]
        if not recipients:
            raise ActionError('Invalid email address')

        subject = self.require(config, 'subject')
        template_id = config.get('templateId') or 'custom'
        body = self.render_body(template_id, config, data)

        reply_to = config.get('replyTo')
        message = EmailMessage(
            subject=subject,
            body=body,
            from_email=automation_setting('DEFAULT_FROM_EMAIL') or settings.DEFAULT_FROM_EMAIL,
            to=recipients,
            reply_to=[ensure_email(reply_to)] if reply_to else None,
        )
        message.send(fail_silently=False)

        logger.info(
            "Automation email sent",
            run_id=run.id,
            recipient_count=len(recipients),
            template_id=template_id,
        )

        return {
            'emailId': f"email_{uuid.uuid4().hex[:12]}",
            'recipients': recipients,
            'templateUsed': template_id,
        }

    def render_body(self, template_id, config, data):
        if template_id == 'custom':
            return config.get('body') or ''

        context = dict(data)
        context['organization'] = ORGANIZATION
        try:
            return render_to_string(f'automations/emails/{template_id}.txt', context)
        except TemplateDoesNotExist:
            raise ActionError(f"Unknown email template: {template_id}")


class SmsExecutor(BaseExecutor):
    action_type = ActionType.SEND_SMS

    def execute(self, config, data, run):
        to = str(self.require(config, 'to')).strip()
        message = self.require(config, 'message')
        if not PHONE_PATTERN.match(to):
            raise ActionError('Invalid phone number')

        gateway_url = automation_setting('SMS_GATEWAY_URL')
        if not gateway_url:
            logger.info(
                "SMS gateway not configured, message not sent",
                run_id=run.id,
                to=to,
                characters=len(str(message)),
            )
            return {'dryRun': True, 'to': to}

        try:
            response = requests.post(
                gateway_url,
                json={
                    'to': to,
                    'from': automation_setting('SMS_FROM_NUMBER'),
                    'message': message,
                },
                headers={'Authorization': f"Bearer {automation_setting('SMS_API_KEY')}"},
                timeout=automation_setting('HTTP_TIMEOUT'),
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ActionError(f"SMS delivery failed: {exc}")

        return {'to': to, 'statusCode': response.status_code}


class SlackExecutor(BaseExecutor):
    action_type = ActionType.SEND_SLACK

    def execute(self, config, data, run):
        channel = self.require(config, 'channel')
        text = self.require(config, 'message')
        mentions = config.get('mentionUsers') or []
        if mentions:
            text = ' '.join([f"<@{user}>" for user in mentions] + [text])

        webhook_url = automation_setting('SLACK_WEBHOOK_URL')
        if not webhook_url:
            logger.info(
                "Slack webhook not configured, message not sent",
                run_id=run.id,
                channel=channel,
                characters=len(text),
            )
            return {'dryRun': True, 'channel': channel}

        try:
            response = requests.post(
                webhook_url,
                json={'channel': channel, 'text': text},
                timeout=automation_setting('HTTP_TIMEOUT'),
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ActionError(f"Slack delivery failed: {exc}")

        return {'channel': channel, 'statusCode': response.status_code}


class WebhookExecutor(BaseExecutor):
    action_type = ActionType.SEND_WEBHOOK

    METHODS = ('GET', 'POST', 'PUT', 'PATCH')

    def execute(self, config, data, run):
        url = self.require(config, 'url')
        try:
            URLValidator(schemes=['http', 'https'])(url)
        except ValidationError:
            raise ActionError('Invalid webhook URL')

        method = str(config.get('method') or 'POST').upper()
        if method not in self.METHODS:
            raise ActionError(f"Unsupported HTTP method: {method}")

        request_kwargs = {
            'headers': config.get('headers') or {},
            'timeout': automation_setting('HTTP_TIMEOUT'),
        }
        body = config.get('body')
        if body and method != 'GET':
            try:
                request_kwargs['json'] = json.loads(body) if isinstance(body, str) else body
            except ValueError:
                request_kwargs['data'] = body

        try:
            response = requests.request(method, url, **request_kwargs)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise ActionError(f"Webhook request failed: {exc}")

        return {'statusCode': response.status_code}


class AddToListExecutor(BaseExecutor):
    action_type = ActionType.ADD_TO_LIST

    def execute(self, config, data, run):
        email = ensure_email(str(self.require(config, 'email')).strip())
        list_id = self.require(config, 'listId')

        membership, created = MailingListMembership.objects.get_or_create(
            list_id=list_id,
            email=email.lower(),
            defaults={'added_by_run': run},
        )
        return {'listId': list_id, 'email': membership.email, 'added': created}


class RemoveFromListExecutor(BaseExecutor):
    action_type = ActionType.REMOVE_FROM_LIST

    def execute(self, config, data, run):
        email = ensure_email(str(self.require(config, 'email')).strip())
        list_id = self.require(config, 'listId')

        deleted, _ = MailingListMembership.objects.filter(
            list_id=list_id,
            email=email.lower(),
        ).delete()
        return {'listId': list_id, 'email': email.lower(), 'removed': deleted > 0}


class CreateTaskExecutor(BaseExecutor):
    action_type = ActionType.CREATE_TASK

    PRIORITIES = [choice for choice, _label in FollowUpTask.PRIORITY_CHOICES]

    def execute(self, config, data, run):
        title = self.require(config, 'title')
        priority = config.get('priority') or 'medium'
        if priority not in self.PRIORITIES:
            raise ActionError(f"Invalid task priority: {priority}")

        due_date = None
        due_in = config.get('dueIn')
        if due_in not in (None, ''):
            try:
                due_date = timezone.localdate() + timedelta(days=int(due_in))
            except (TypeError, ValueError):
                raise ActionError(f"Invalid dueIn: {due_in}")

        task = FollowUpTask.objects.create(
            title=title[:255],
            description=config.get('description') or '',
            assign_to=config.get('assignTo') or '',
            priority=priority,
            due_date=due_date,
            automation_run=run,
        )
        return {
            'taskId': task.id,
            'dueDate': due_date.isoformat() if due_date else None,
        }


class DelayExecutor(BaseExecutor):
    """
    Compute when the run should continue.

    The runner queues the continuation; nothing sleeps here.
    """

    action_type = ActionType.DELAY

    def execute(self, config, data, run):
        unit = config.get('unit')
        if unit not in DELAY_UNITS:
            raise ActionError(f"Invalid delay unit: {unit}")
        try:
            duration = float(config.get('duration'))
        except (TypeError, ValueError):
            raise ActionError(f"Invalid delay duration: {config.get('duration')}")
        if duration < 0:
            raise ActionError(f"Invalid delay duration: {config.get('duration')}")

        seconds = int(duration * DELAY_UNITS[unit])
        resume_at = timezone.now() + timedelta(seconds=seconds)
        return {'resumeAt': resume_at.isoformat(), 'delaySeconds': seconds}


class ConditionExecutor(BaseExecutor):
    """Evaluate ``config['conditions']`` against the trigger data."""

    action_type = ActionType.CONDITION

    def execute(self, config, data, run):
        conditions = config.get('conditions') or []
        match_type = config.get('matchType') or 'all'
        if match_type not in ('all', 'any'):
            raise ActionError(f"Invalid matchType: {match_type}")
        return {'matched': evaluate_conditions(conditions, data, match_type)}


EXECUTORS = {
    executor.action_type: executor
    for executor in (
        EmailExecutor(),
        SmsExecutor(),
        SlackExecutor(),
        WebhookExecutor(),
        AddToListExecutor(),
        RemoveFromListExecutor(),
        CreateTaskExecutor(),
        DelayExecutor(),
        ConditionExecutor(),
    )
}


def get_executor(action_type):
    """Executor for ``action_type``; raises ``UnsupportedActionError`` if none."""
    executor = EXECUTORS.get(action_type)
    if executor is None:
        raise UnsupportedActionError(action_type)
    return executor
