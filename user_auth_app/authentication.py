import logging
from datetime import timedelta

import jwt
from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import authentication

from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def generate_token(user):
    """
    Issues a signed bearer token for `user`.

    The payload carries the identity and role claims the clients rely on
    (`id`, `email`, `role`, `store_id`) and expires after `JWT_EXPIRES_HOURS`.
    """
    issued_at = timezone.now()
    payload = {
        'id': user.id,
        'email': user.email,
        'role': user.role,
        'store_id': user.store_id,
        'iat': issued_at,
        'exp': issued_at + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    """Verifies signature and expiry and returns the payload."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


class JWTAuthentication(authentication.BaseAuthentication):
    """
    Authenticates requests carrying `Authorization: Bearer <token>`.

    The token only identifies the user; the account itself is re-loaded from the database on
    every request so role changes and deletions take effect immediately.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()

        if not header or header[0].lower() != self.keyword.lower().encode():
            # No bearer credentials; let the permission classes decide.
            return None

        if len(header) != 2:
            raise AuthenticationError('Invalid token header')

        try:
            token = header[1].decode()
        except UnicodeError:
            raise AuthenticationError('Invalid token header')

        return self.authenticate_credentials(token)

    def authenticate_credentials(self, token):
        try:
            payload = decode_token(token)
        except jwt.ExpiredSignatureError:
            raise AuthenticationError('Token expired')
        except jwt.InvalidTokenError:
            raise AuthenticationError('Invalid token')

        User = get_user_model()
        try:
            user = User.objects.select_related('store').get(pk=payload.get('id'))
        except User.DoesNotExist:
            logger.warning('Token presented for missing user id=%s', payload.get('id'))
            raise AuthenticationError('Invalid token - user not found')

        if not user.is_active:
            raise AuthenticationError('User account is disabled')

        return (user, payload)

    def authenticate_header(self, request):
        # A non-empty value makes DRF answer 401 instead of 403 for unauthenticated requests.
        return self.keyword
