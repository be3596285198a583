"""
Custom exception handler for the Acts 29 Ministry API.

Every error leaves the API in the same envelope the back-office front-end
consumes:

    {"success": false, "error": "<message>", "details": [...]}

Views may set ``failure_message`` (used for unexpected 500 errors) and
``validation_message`` (used for 400 validation errors) to tailor the message.
"""

import logging
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler


logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = 'Internal server error'
DEFAULT_VALIDATION_MESSAGE = 'Invalid request data'


def api_exception_handler(exc, context):
    """
    Exception handler that returns ``{success: false, error}`` responses.

    Errors DRF knows about keep their status code. Anything else is logged
    with its traceback and answered with HTTP 500.
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)
    view = context.get('view')

    if response is None:
        log_error(exc, context, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(
            {
                'success': False,
                'error': getattr(view, 'failure_message', DEFAULT_FAILURE_MESSAGE),
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        payload = {
            'success': False,
            'error': getattr(view, 'validation_message', DEFAULT_VALIDATION_MESSAGE),
            'details': format_validation_errors(response.data),
        }
    else:
        payload = {
            'success': False,
            'error': get_error_detail(response.data),
        }

    # Log the error for monitoring
    log_error(exc, context, response.status_code)

    response.data = payload
    return response


def get_error_detail(data):
    """Extract human-readable detail from response data."""
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        elif 'non_field_errors' in data:
            return '; '.join(str(error) for error in data['non_field_errors'])
        else:
            # Return first error message found
            for key, value in data.items():
                if isinstance(value, list) and value:
                    return f"{key}: {value[0]}"
                elif isinstance(value, str):
                    return f"{key}: {value}"
    elif isinstance(data, list) and data:
        return str(data[0])

    return str(data)


def format_validation_errors(data, prefix=''):
    """
    Flatten DRF validation errors into ``[{name, reason}]``.

    Nested serializer errors are reported with dotted names such as
    ``steps.1.action.type``.
    """
    if isinstance(data, list):
        if all(not isinstance(item, (dict, list)) for item in data):
            return [{'name': prefix or 'non_field_errors', 'reason': str(item)} for item in data]
        invalid_params = []
        for index, item in enumerate(data):
            if item:
                name = f"{prefix}.{index}" if prefix else str(index)
                invalid_params.extend(format_validation_errors(item, name))
        return invalid_params

    if not isinstance(data, dict):
        return [{'name': prefix or 'non_field_errors', 'reason': str(data)}]

    invalid_params = []
    for field, errors in data.items():
        name = f"{prefix}.{field}" if prefix else field
        invalid_params.extend(format_validation_errors(errors, name))

    return invalid_params


def log_error(exc, context, status_code):
    """Log error for monitoring and debugging."""
    request = context.get('request')
    user = getattr(request, 'user', None)

    logger.error(
        f"API Error {status_code}: {exc}",
        extra={
            'status_code': status_code,
            'exception_type': type(exc).__name__,
            'user_id': getattr(user, 'id', None) if user and user.is_authenticated else None,
            'path': request.path if request else None,
            'method': request.method if request else None,
            'ip_address': get_client_ip(request) if request else None,
        },
        exc_info=status_code >= 500  # Include stack trace for 5xx errors
    )


def get_client_ip(request):
    """Get client IP address from request."""
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip
