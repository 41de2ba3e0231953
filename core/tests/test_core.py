from io import StringIO
import subprocess
import sys

from django.conf import settings
from django.core.management import call_command
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.test import APITestCase

from core.exceptions import ConflictError, envelope_exception_handler, flatten_errors


class HealthCheckTests(APITestCase):

    def test_health_is_public(self):
        response = self.client.get(reverse('health'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Store Rating System API is running')
        self.assertIn('timestamp', response.data)

    def test_trailing_slash_is_not_routed(self):
        response = self.client.get('/api/health/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ErrorEnvelopeTests(SimpleTestCase):
    """
    Test suite for the project-wide exception handler and its error envelope.
    """

    def test_flatten_errors(self):
        detail = {
            'email': ['Enter a valid email address.'],
            'store': {'name': ['This field is required.']},
            'non_field_errors': ['Passwords do not match'],
        }

        self.assertEqual(flatten_errors(detail), [
            {'field': 'email', 'message': 'Enter a valid email address.'},
            {'field': 'store.name', 'message': 'This field is required.'},
            {'field': 'non_field_errors', 'message': 'Passwords do not match'},
        ])

    def test_field_validation_error(self):
        response = envelope_exception_handler(
            ValidationError({'rating': ['Rating must be between 1 and 5']}), {}
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'success': False,
            'message': 'Validation failed',
            'errors': [{'field': 'rating', 'message': 'Rating must be between 1 and 5'}],
        })

    def test_non_field_validation_error_uses_its_message(self):
        response = envelope_exception_handler(ValidationError('No store linked'), {})

        self.assertEqual(response.data['message'], 'No store linked')

    def test_conflict_and_not_found(self):
        conflict = envelope_exception_handler(ConflictError('Store already has an owner'), {})
        missing = envelope_exception_handler(NotFound('Store not found'), {})

        self.assertEqual(conflict.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(conflict.data, {'success': False, 'message': 'Store already has an owner'})
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data, {'success': False, 'message': 'Store not found'})

    def test_unexpected_error_becomes_500(self):
        with self.assertLogs('core.exceptions', level='ERROR'):
            response = envelope_exception_handler(RuntimeError('database on fire'), {})

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'success': False, 'message': 'Internal server error'})


class ProjectStartupTests(SimpleTestCase):
    """
    Boots the project with its real settings in a fresh interpreter.

    The test process has already imported every module, so an import cycle between the
    apps only shows up when Django starts from scratch.
    """

    def test_manage_py_check_in_fresh_interpreter(self):
        result = subprocess.run(
            [sys.executable, 'manage.py', 'check'],
            cwd=settings.BASE_DIR,
            capture_output=True,
            text=True,
            timeout=120
        )

        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertIn('System check identified no issues', result.stdout)

    def test_system_checks_pass(self):
        # Raises SystemCheckError if any check fails.
        call_command('check', stdout=StringIO())
