import logging

from django.conf import settings
from django.db.models import Count, Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.filters import SearchFilter
from rest_framework.views import APIView

from core.exceptions import NotFoundError, ValidationError
from core.filters import SortByOrderingFilter
from core.responses import success_response
from ratings_app.api.serializers import StoreRatingSerializer, UserRatingSerializer
from ratings_app.models import Rating
from ratings_app.services import recent_cutoff, top_rated_stores
from stores_app.models import Store
from user_auth_app.api.filters import UserFilter
from user_auth_app.api.permissions import IsAdmin
from user_auth_app.api.serializers import (
    AdminUserCreateSerializer,
    AdminUserUpdateSerializer,
    UserDetailSerializer,
    UserSerializer,
)
from user_auth_app.models import User

logger = logging.getLogger(__name__)


class DashboardView(APIView):
    """
    Platform-wide summary for administrators.

    The numbers are not tied to a single model: users, stores and ratings are counted with
    database-level aggregates on every request, nothing is cached.

    Endpoint:
        GET /api/admin/dashboard
    """
    permission_classes = [IsAdmin]

    def get(self, request, format=None):
        cutoff = recent_cutoff()

        user_counts = User.objects.aggregate(
            total=Count('id'),
            recent=Count('id', filter=Q(created_at__gte=cutoff)),
            **{f'role_{role}': Count('id', filter=Q(role=role)) for role in User.Role.values}
        )
        rating_counts = Rating.objects.aggregate(
            total=Count('id'),
            recent=Count('id', filter=Q(created_at__gte=cutoff))
        )

        data = {
            'users': {
                'total': user_counts['total'],
                'byRole': {role: user_counts[f'role_{role}'] for role in User.Role.values},
                'recentSignups': user_counts['recent'],
            },
            'stores': {
                'total': Store.objects.count(),
            },
            'ratings': {
                'total': rating_counts['total'],
                'recent': rating_counts['recent'],
            },
            'topStores': top_rated_stores(
                min_ratings=settings.TOP_STORES_MIN_RATINGS,
                limit=settings.TOP_STORES_LIMIT
            ),
        }
        return success_response(data)


class AdminUserViewSet(viewsets.ModelViewSet):
    """
    User management for administrators.

    - `GET /api/admin/users`: Lists users; filters `name`, `email`, `address`, `role`,
      free-text `search` and `sortBy`/`sortOrder`.
    - `POST /api/admin/users`: Creates a user with any role, optionally linked to a store.
    - `GET /api/admin/users/{id}`: A user with their ratings (for a `user`) or the ratings of
      their store (for a `store_owner`).
    - `PUT/PATCH /api/admin/users/{id}`: Partial update.
    - `DELETE /api/admin/users/{id}`: Deletes a user and their ratings.
    """
    permission_classes = [IsAdmin]
    queryset = User.objects.select_related('store')
    lookup_value_regex = r'\d+'
    filter_backends = [DjangoFilterBackend, SearchFilter, SortByOrderingFilter]
    filterset_class = UserFilter
    search_fields = ['name', 'email', 'address']
    ordering_fields = ['name', 'email', 'address', 'role', 'created_at']
    ordering = ['created_at']

    def get_serializer_class(self):
        if self.action == 'create':
            return AdminUserCreateSerializer
        if self.action in ['update', 'partial_update']:
            return AdminUserUpdateSerializer
        if self.action == 'retrieve':
            return UserDetailSerializer
        return UserSerializer

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs['pk'])
        except User.DoesNotExist:
            raise NotFoundError('User not found')

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        users = self.get_serializer(queryset, many=True).data
        return success_response({'users': users, 'total': len(users)})

    def retrieve(self, request, *args, **kwargs):
        user = self.get_object()
        data = {'user': self.get_serializer(user).data}

        if user.is_store_owner and user.store_id is not None:
            ratings = (
                Rating.objects.filter(store_id=user.store_id)
                .select_related('user')
                .order_by('-created_at')
            )
            data['storeRatings'] = StoreRatingSerializer(ratings, many=True).data
        elif user.is_regular_user:
            ratings = (
                Rating.objects.filter(user=user)
                .select_related('store')
                .order_by('-updated_at')
            )
            data['userRatings'] = UserRatingSerializer(ratings, many=True).data

        return success_response(data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info('Admin id=%s created user id=%s with role %s', request.user.id, user.id, user.role)
        return success_response(
            {'user': UserDetailSerializer(user).data},
            'User created successfully',
            status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        user = self.get_object()
        serializer = self.get_serializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success_response(
            {'user': UserDetailSerializer(user).data},
            'User updated successfully'
        )

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        if user.pk == request.user.pk:
            raise ValidationError('You cannot delete your own account')

        user_id = user.id
        self.perform_destroy(user)
        logger.info('Admin id=%s deleted user id=%s', request.user.id, user_id)
        return success_response(message='User deleted successfully')
