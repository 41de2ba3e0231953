from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from user_auth_app.authentication import decode_token
from user_auth_app.models import User


class RegistrationTests(APITestCase):
    """
    Test suite for self-service sign up.

    Covers the happy path, the password policy, the name and address limits and duplicate
    email handling.
    """

    def setUp(self):
        self.url = reverse('registration')
        self.data = {
            'name': 'Margaret Evelyn Thompson',
            'email': 'Margaret@Example.com',
            'password': 'Secure#Pass1',
            'address': '12 Harbour Road, Seaside'
        }

    def test_registration_success(self):
        """
        A valid sign up returns 201 with the new user and a token, and always assigns the
        `user` role.
        """
        response = self.client.post(self.url, {**self.data, 'role': 'admin'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'User registered successfully')

        user_data = response.data['data']['user']
        self.assertEqual(user_data['email'], 'margaret@example.com')
        self.assertEqual(user_data['role'], 'user')
        self.assertIsNone(user_data['store_id'])
        self.assertNotIn('password', user_data)

        payload = decode_token(response.data['data']['token'])
        self.assertEqual(payload['id'], user_data['id'])
        self.assertEqual(payload['role'], 'user')

        user = User.objects.get(email='margaret@example.com')
        self.assertTrue(user.check_password('Secure#Pass1'))
        self.assertFalse(user.is_staff)

    def test_registration_duplicate_email_is_case_insensitive(self):
        self.client.post(self.url, self.data, format='json')
        response = self.client.post(
            self.url, {**self.data, 'email': 'MARGARET@example.com'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'User with this email already exists')
        self.assertEqual(User.objects.count(), 1)

    def test_registration_rejects_weak_passwords(self):
        """Each broken rule of the password policy is reported against the password field."""
        for password in ['Sh#rt1', 'alllowercase#1', 'NoSpecialChar1', 'Far#TooLongPassword1']:
            with self.subTest(password=password):
                response = self.client.post(
                    self.url, {**self.data, 'password': password}, format='json'
                )
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.data['message'], 'Validation failed')
                fields = {error['field'] for error in response.data['errors']}
                self.assertEqual(fields, {'password'})

        self.assertFalse(User.objects.exists())

    def test_registration_name_length_limits(self):
        for name in ['Too Short Name', 'N' * 61]:
            with self.subTest(length=len(name)):
                response = self.client.post(self.url, {**self.data, 'name': name}, format='json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(
                    {'field': 'name', 'message': 'Name must be between 20 and 60 characters'},
                    response.data['errors']
                )

    def test_registration_accepts_boundary_lengths(self):
        data = {**self.data, 'name': 'N' * 20, 'address': 'A' * 400, 'password': 'Abcdef#1'}
        response = self.client.post(self.url, data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_registration_address_too_long(self):
        response = self.client.post(self.url, {**self.data, 'address': 'A' * 401}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'address')

    def test_registration_missing_fields(self):
        response = self.client.post(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        fields = {error['field'] for error in response.data['errors']}
        self.assertEqual(fields, {'name', 'email', 'password', 'address'})

    def test_registration_invalid_email(self):
        response = self.client.post(self.url, {**self.data, 'email': 'not-an-email'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn(
            {'field': 'email', 'message': 'Please provide a valid email address'},
            response.data['errors']
        )
