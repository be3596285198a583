"""
Structured logging utilities with JSON formatting and sensitive data filtering.

Provides production-ready logging with:
- PII and sensitive data filtering (automation runs carry donor emails and phones)
- Structured JSON output for log aggregation
- Automation lifecycle events with run and automation identifiers
"""

import json
import logging
import re
import traceback
from typing import Dict, Any
from datetime import datetime

# Attributes every LogRecord carries; anything else came in through ``extra``.
RESERVED_RECORD_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelno', 'levelname', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'taskName', 'message', 'asctime',
])


class SensitiveDataFilter(logging.Filter):
    """
    Filter to remove sensitive data from log records.

    Prevents PII leakage by filtering out common sensitive patterns.
    """

    # Patterns for sensitive data that should be filtered
    SENSITIVE_PATTERNS = [
        # Email patterns
        (re.compile(
            r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), '[EMAIL]'),
        # Credit card numbers
        (re.compile(r'\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b'), '[CARD]'),
        # Passwords, tokens and API keys
        (re.compile(
            r'(password|token|secret|api_key|key)\s*[:=]\s*[\'"][^\'"\s]+[\'"]', re.IGNORECASE), r'\1=[FILTERED]'),
        # JWT tokens
        (re.compile(
            r'eyJ[A-Za-z0-9-_=]+\.[A-Za-z0-9-_=]+\.?[A-Za-z0-9-_.+/=]*'), '[JWT_TOKEN]'),
        # Slack incoming webhook URLs embed their secret in the path
        (re.compile(r'https://hooks\.slack\.com/services/[A-Za-z0-9/]+'), '[SLACK_WEBHOOK]'),
        # Phone numbers: (123) 456-7890, 123-456-7890, +1 217 555 0199, +15551234567
        (re.compile(
            r'(?<![\w+])\+?(?:\d{1,3}[\s.-]?)?(?:\(\d{3}\)|\d{3})[\s.-]?\d{3}[\s.-]?\d{4}\b'), '[PHONE]'),
    ]

    # Fields that should be completely removed from logs
    SENSITIVE_FIELDS = {
        'password', 'token', 'secret', 'key', 'api_key', 'authorization',
        'access_token', 'refresh_token', 'secret_key', 'sms_api_key',
        'webhook_url', 'slack_webhook_url',
    }

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter sensitive data from log record.

        Returns True to allow the record to be logged.
        """
        if isinstance(record.msg, str):
            record.msg = self._filter_string(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = self._filter_dict(record.args)
            else:
                record.args = tuple(self._filter_value(arg) for arg in record.args)

        # Values passed through ``extra``
        for attr_name, attr_value in list(record.__dict__.items()):
            if attr_name in RESERVED_RECORD_ATTRS or attr_name.startswith('_'):
                continue
            if attr_name.lower() in self.SENSITIVE_FIELDS:
                setattr(record, attr_name, '[FILTERED]')
            else:
                setattr(record, attr_name, self._filter_value(attr_value))

        return True

    def _filter_value(self, value):
        if isinstance(value, str):
            return self._filter_string(value)
        if isinstance(value, dict):
            return self._filter_dict(value)
        if isinstance(value, (list, tuple)):
            return [self._filter_value(item) for item in value]
        return value

    def _filter_string(self, text: str) -> str:
        """Filter sensitive patterns from string."""
        if not text:
            return text

        filtered_text = text
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            filtered_text = pattern.sub(replacement, filtered_text)

        return filtered_text

    def _filter_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Filter sensitive fields from dictionary."""
        filtered_data = {}
        for key, value in data.items():
            if str(key).lower() in self.SENSITIVE_FIELDS:
                filtered_data[key] = '[FILTERED]'
            else:
                filtered_data[key] = self._filter_value(value)

        return filtered_data


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for better parsing by log aggregation systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        # Add exception information if present
        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Add any extra attributes (run_id, automation_id, status_code, ...)
        for key, value in record.__dict__.items():
            if key in RESERVED_RECORD_ATTRS or key.startswith('_'):
                continue
            if key not in log_entry:  # Don't overwrite existing keys
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def log_automation_event(event_type: str, run=None, automation=None, details: Dict[str, Any] = None):
    """
    Log automation lifecycle events for analytics and monitoring.

    Args:
        event_type: Type of event (run_started, run_completed, step_failed, ...)
        run: AutomationRun associated with the event
        automation: Automation associated with the event
        details: Additional details about the event
    """
    logger = logging.getLogger('automations.events')

    log_data = {
        'event_type': event_type,
        'automation_event': True,
    }

    if run is not None:
        log_data['run_id'] = run.id
        log_data['automation_id'] = run.automation_id
    if automation is not None:
        log_data['automation_id'] = automation.id

    if details:
        log_data.update(details)

    level = logging.WARNING if event_type.endswith('failed') else logging.INFO
    logger.log(level, f"Automation event: {event_type}", extra=log_data)
