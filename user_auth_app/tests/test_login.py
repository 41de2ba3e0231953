from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from user_auth_app.authentication import decode_token
from user_auth_app.models import User


class LoginTests(APITestCase):
    """
    Test suite for the login endpoint.

    Successful logins return the user and a bearer token; wrong credentials are answered
    with 401 and a message that does not reveal which part was wrong.
    """

    def setUp(self):
        self.url = reverse('login')
        self.user = User.objects.create_user(
            email='owner@example.com',
            password='Owner#Pass1',
            name='Olivia Catherine Owner',
            address='1 Market Square',
            role=User.Role.STORE_OWNER
        )

    def test_login_success(self):
        response = self.client.post(
            self.url, {'email': 'owner@example.com', 'password': 'Owner#Pass1'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Login successful')
        self.assertEqual(response.data['data']['user']['id'], self.user.id)
        self.assertEqual(response.data['data']['user']['role'], 'store_owner')

        payload = decode_token(response.data['data']['token'])
        self.assertEqual(payload['email'], 'owner@example.com')
        self.assertEqual(payload['role'], 'store_owner')
        self.assertIn('exp', payload)

    def test_login_email_is_case_insensitive(self):
        response = self.client.post(
            self.url, {'email': 'OWNER@Example.com', 'password': 'Owner#Pass1'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_bad_credentials(self):
        for credentials in [
            {'email': 'owner@example.com', 'password': 'Wrong#Pass1'},
            {'email': 'nobody@example.com', 'password': 'Owner#Pass1'},
        ]:
            with self.subTest(email=credentials['email']):
                response = self.client.post(self.url, credentials, format='json')
                self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
                self.assertEqual(
                    response.data, {'success': False, 'message': 'Invalid email or password'}
                )

    def test_login_missing_data(self):
        response = self.client.post(self.url, {'email': 'owner@example.com'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'password')

    def test_login_ignores_stale_bearer_header(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = self.client.post(
            self.url, {'email': 'owner@example.com', 'password': 'Owner#Pass1'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
