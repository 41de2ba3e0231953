import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from core.responses import success_response
from user_auth_app.authentication import JWTAuthentication, generate_token
from .serializers import (
    LoginSerializer,
    PasswordUpdateSerializer,
    RegistrationSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class RegistrationView(APIView):
    """
    Handles new user registration.

    Endpoint:
        POST /api/auth/register

    Request Body:
        - name (str): 20 to 60 characters.
        - email (str): The user's email address.
        - password (str): 8 to 16 characters with an uppercase and a special character.
        - address (str): Up to 400 characters.

    Responses:
        - 201 Created: `{"success": true, "data": {"user": {...}, "token": "..."}}`
        - 400 Bad Request: Validation failed or the email is already registered.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('Registered user id=%s', user.id)

        data = {
            'user': UserSerializer(user).data,
            'token': generate_token(user)
        }
        return success_response(data, 'User registered successfully', status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Exchanges email and password for a bearer token.

    Endpoint:
        POST /api/auth/login

    Responses:
        - 200 OK: `{"success": true, "data": {"user": {...}, "token": "..."}}`
        - 400 Bad Request: Email or password missing or malformed.
        - 401 Unauthorized: Invalid email or password.
    """
    # Credentials are checked by the serializer; a stale bearer header must not block login.
    authentication_classes = []
    permission_classes = [AllowAny]

    def get_authenticate_header(self, request):
        # Keeps bad credentials a 401 although no authentication class runs.
        return JWTAuthentication.keyword

    def post(self, request):
        serializer = LoginSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']

        data = {
            'user': UserSerializer(user).data,
            'token': generate_token(user)
        }
        return success_response(data, 'Login successful')


class PasswordUpdateView(APIView):
    """
    Changes the password of the logged-in user.

    Endpoint:
        PUT /api/auth/password

    Request Body:
        - currentPassword (str)
        - newPassword (str): Must satisfy the password policy.
    """
    permission_classes = [IsAuthenticated]

    def put(self, request):
        serializer = PasswordUpdateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info('Password updated for user id=%s', request.user.id)
        return success_response(message='Password updated successfully')


class LogoutView(APIView):
    """
    Acknowledges a logout.

    Tokens are stateless, so there is nothing to revoke server-side; the client discards its
    token.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        return success_response(message='Logout successful')


class MeView(APIView):
    """Returns the profile of the logged-in user."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return success_response({'user': UserSerializer(request.user).data})
