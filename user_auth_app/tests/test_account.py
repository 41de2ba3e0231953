from datetime import timedelta

import jwt
from django.conf import settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from user_auth_app.authentication import generate_token
from user_auth_app.models import User


class BearerAuthenticationTests(APITestCase):
    """
    Test suite for the bearer token handling shared by all protected endpoints.
    """

    def setUp(self):
        self.url = reverse('me')
        self.user = User.objects.create_user(
            email='reader@example.com',
            password='Reader#Pass1',
            name='Rebecca Louise Reader',
            address='5 Library Lane'
        )

    def authorize(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def test_valid_token_returns_current_user(self):
        self.authorize(generate_token(self.user))
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['email'], 'reader@example.com')

    def test_missing_token(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_malformed_token(self):
        self.authorize('abc.def.ghi')
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Invalid token')

    def test_expired_token(self):
        issued_at = timezone.now() - timedelta(hours=48)
        token = jwt.encode(
            {'id': self.user.id, 'iat': issued_at, 'exp': issued_at + timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM
        )
        self.authorize(token)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Token expired')

    def test_token_of_deleted_user(self):
        token = generate_token(self.user)
        self.user.delete()
        self.authorize(token)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Invalid token - user not found')

    def test_role_is_reloaded_from_database(self):
        """A role change takes effect even for a token issued before it."""
        token = generate_token(self.user)
        User.objects.filter(pk=self.user.pk).update(role=User.Role.ADMIN)
        self.authorize(token)
        response = self.client.get(reverse('admin-dashboard'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)


class PasswordUpdateTests(APITestCase):

    def setUp(self):
        self.url = reverse('password-update')
        self.user = User.objects.create_user(
            email='changer@example.com',
            password='Old#Password1',
            name='Christopher Changer Jr',
            address='9 Turnover Street'
        )
        self.client.force_authenticate(user=self.user)

    def test_password_update_success(self):
        response = self.client.put(
            self.url,
            {'currentPassword': 'Old#Password1', 'newPassword': 'New#Password1'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Password updated successfully')

        self.client.force_authenticate(user=None)
        login = self.client.post(
            reverse('login'),
            {'email': 'changer@example.com', 'password': 'New#Password1'},
            format='json'
        )
        self.assertEqual(login.status_code, status.HTTP_200_OK)

    def test_password_update_wrong_current_password(self):
        response = self.client.put(
            self.url,
            {'currentPassword': 'Wrong#Password1', 'newPassword': 'New#Password1'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Current password is incorrect')
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Old#Password1'))

    def test_password_update_enforces_policy(self):
        response = self.client.put(
            self.url,
            {'currentPassword': 'Old#Password1', 'newPassword': 'weakpassword'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors'][0]['field'], 'newPassword')

    def test_password_update_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.put(
            self.url,
            {'currentPassword': 'Old#Password1', 'newPassword': 'New#Password1'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class LogoutAndMeTests(APITestCase):

    def setUp(self):
        self.user = User.objects.create_user(
            email='leaver@example.com',
            password='Leaver#Pass1',
            name='Leonard Patrick Leaver',
            address='3 Exit Road'
        )
        self.client.force_authenticate(user=self.user)

    def test_logout(self):
        response = self.client.post(reverse('logout'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True, 'message': 'Logout successful'})

    def test_me(self):
        response = self.client.get(reverse('me'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['id'], self.user.id)
        self.assertEqual(response.data['data']['user']['name'], 'Leonard Patrick Leaver')
