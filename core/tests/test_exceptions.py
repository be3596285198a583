"""
Tests for the API exception handler.
"""

from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.test import APIRequestFactory

from core.exceptions import (
    api_exception_handler,
    format_validation_errors,
    get_client_ip,
    get_error_detail,
)


class StubView:
    failure_message = 'Failed to fetch templates'
    validation_message = 'Invalid automation data'


class ApiExceptionHandlerTest(SimpleTestCase):

    def setUp(self):
        self.request = APIRequestFactory().get('/api/v1/automations/templates/')

    def handle(self, exc, view=None):
        return api_exception_handler(exc, {'request': self.request, 'view': view})

    def test_unexpected_exception_uses_view_failure_message(self):
        response = self.handle(RuntimeError('boom'), StubView())

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'success': False, 'error': 'Failed to fetch templates'})

    def test_unexpected_exception_default_message(self):
        response = self.handle(RuntimeError('boom'), object())

        self.assertEqual(response.data, {'success': False, 'error': 'Internal server error'})

    def test_validation_error(self):
        exc = ValidationError({'trigger': {'type': ['Unknown trigger type: x']}})

        response = self.handle(exc, StubView())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid automation data')
        self.assertEqual(
            response.data['details'],
            [{'name': 'trigger.type', 'reason': 'Unknown trigger type: x'}]
        )

    def test_not_found_keeps_detail(self):
        response = self.handle(NotFound('Template not found'), StubView())

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'success': False, 'error': 'Template not found'})

    def test_permission_denied(self):
        response = self.handle(PermissionDenied(), StubView())

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data['success'])


class ErrorFormattingTest(SimpleTestCase):

    def test_format_nested_list_errors(self):
        errors = {
            'name': ['This field is required.'],
            'steps': [
                {},
                {'action': {'config': ['Missing required field: message']}},
            ],
        }

        self.assertEqual(format_validation_errors(errors), [
            {'name': 'name', 'reason': 'This field is required.'},
            {'name': 'steps.1.action.config', 'reason': 'Missing required field: message'},
        ])

    def test_format_non_field_errors(self):
        self.assertEqual(
            format_validation_errors(['Duplicate step id: step1']),
            [{'name': 'non_field_errors', 'reason': 'Duplicate step id: step1'}]
        )

    def test_get_error_detail(self):
        self.assertEqual(get_error_detail({'detail': 'Not found.'}), 'Not found.')
        self.assertEqual(get_error_detail({'limit': ['Too large']}), 'limit: Too large')

    def test_client_ip_prefers_forwarded_for(self):
        request = APIRequestFactory().get('/', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1')

        self.assertEqual(get_client_ip(request), '203.0.113.7')
