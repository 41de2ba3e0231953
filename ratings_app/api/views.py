from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status, viewsets
from rest_framework.permissions import IsAuthenticated

from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from core.filters import SortByOrderingFilter
from core.responses import success_response
from stores_app.models import Store
from user_auth_app.api.permissions import (
    IsRegularUser,
    IsStoreOwner,
    IsStoreOwnerOrAdmin,
    IsUserOrAdmin,
)
from .. import services
from ..models import Rating
from .filters import RatingFilter
from .serializers import (
    RatingReadSerializer,
    RatingSubmitSerializer,
    RatingUpdateSerializer,
    StoreRatingSerializer,
    UserRatingSerializer,
)

DEFAULT_HISTORY_LIMIT = 50


class RatingViewSet(viewsets.GenericViewSet):
    """
    Write endpoints for the requesting user's own ratings.

    - `POST /api/ratings`: Submits a rating; resubmitting for the same store overwrites it.
    - `PUT/PATCH /api/ratings/{id}`: Changes the value of an own rating.
    - `DELETE /api/ratings/{id}`: Deletes an own rating.

    Only users with the `user` role may rate. Ownership is enforced by the rating services,
    which treat a rating of another user exactly like a missing one (404).
    """
    permission_classes = [IsRegularUser]
    serializer_class = RatingReadSerializer
    lookup_value_regex = r'\d+'

    def get_serializer_class(self):
        if self.action == 'create':
            return RatingSubmitSerializer
        if self.action in ['update', 'partial_update']:
            return RatingUpdateSerializer
        return RatingReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rating, created = services.submit_rating(
            request.user,
            serializer.validated_data['store_id'],
            serializer.validated_data['rating']
        )
        return success_response(
            {'rating': RatingReadSerializer(rating).data},
            'Rating submitted successfully' if created else 'Rating updated successfully',
            status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rating = services.update_rating(
            int(kwargs['pk']), request.user, serializer.validated_data['rating']
        )
        return success_response(
            {'rating': RatingReadSerializer(rating).data},
            'Rating updated successfully'
        )

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        services.delete_rating(int(kwargs['pk']), request.user)
        return success_response(message='Rating deleted successfully')


class StoreRatingListView(generics.GenericAPIView):
    """
    Lists the ratings of one store together with its live statistics.

    Endpoint:
        GET /api/ratings/store/{store_id}

    Store owners may only look at their own store; admins at any store. Supports
    `minRating`, `maxRating`, `sortBy` (rating, created_at, updated_at) and `sortOrder`.
    """
    permission_classes = [IsStoreOwnerOrAdmin]
    serializer_class = StoreRatingSerializer
    filter_backends = [DjangoFilterBackend, SortByOrderingFilter]
    filterset_class = RatingFilter
    ordering_fields = ['rating', 'created_at', 'updated_at']
    ordering = ['-created_at']

    def get_queryset(self):
        return Rating.objects.filter(store_id=self.kwargs['store_id']).select_related('user')

    def get(self, request, store_id):
        user = request.user
        if user.is_store_owner and user.store_id != store_id:
            raise AuthorizationError('Access denied - you can only view ratings for your own store')

        if not Store.objects.filter(pk=store_id).exists():
            raise NotFoundError('Store not found')

        ratings = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True).data
        data = {
            'ratings': ratings,
            'stats': services.store_rating_stats(store_id),
            'total': len(ratings)
        }
        return success_response(data)


def ensure_self_or_admin(request, user_id):
    if not request.user.is_admin and request.user.id != user_id:
        raise AuthorizationError('Access denied - you can only view your own ratings')


class UserRatingListView(generics.GenericAPIView):
    """
    Lists the ratings given by one user, newest change first.

    Endpoint:
        GET /api/ratings/user/{user_id}

    Users may only list their own ratings; admins anyone's. Supports `storeId`,
    `minRating` and `maxRating`.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = UserRatingSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = RatingFilter

    def get_queryset(self):
        return (
            Rating.objects.filter(user_id=self.kwargs['user_id'])
            .select_related('store')
            .order_by('-updated_at')
        )

    def get(self, request, user_id):
        ensure_self_or_admin(request, user_id)
        ratings = self.get_serializer(self.filter_queryset(self.get_queryset()), many=True).data
        return success_response({'ratings': ratings, 'total': len(ratings)})


class UserStoreRatingView(generics.GenericAPIView):
    """
    Returns the rating one user gave to one store.

    Endpoint:
        GET /api/ratings/user/{user_id}/store/{store_id}
    """
    permission_classes = [IsAuthenticated]
    serializer_class = RatingReadSerializer

    def get(self, request, user_id, store_id):
        ensure_self_or_admin(request, user_id)
        rating = Rating.objects.filter(user_id=user_id, store_id=store_id).first()
        if rating is None:
            raise NotFoundError('Rating not found')
        return success_response({'rating': self.get_serializer(rating).data})


class MyRatingListView(generics.GenericAPIView):
    """
    The requesting user's rating history, newest change first.

    Endpoint:
        GET /api/ratings/my-ratings?limit=50
    """
    permission_classes = [IsRegularUser]
    serializer_class = UserRatingSerializer

    def get_limit(self):
        raw_limit = self.request.query_params.get('limit')
        if raw_limit in (None, ''):
            return DEFAULT_HISTORY_LIMIT
        try:
            limit = int(raw_limit)
        except ValueError:
            limit = 0
        if limit < 1:
            raise ValidationError({'limit': ['Limit must be a positive integer']})
        return limit

    def get(self, request):
        queryset = (
            Rating.objects.filter(user=request.user)
            .select_related('store')
            .order_by('-updated_at')[:self.get_limit()]
        )
        ratings = self.get_serializer(queryset, many=True).data
        return success_response({'ratings': ratings, 'total': len(ratings)})


class MyStoreSummaryView(generics.GenericAPIView):
    """
    Ratings and statistics for the store owned by the requesting store owner.

    Endpoint:
        GET /api/ratings/my-store/summary
    """
    permission_classes = [IsStoreOwner]
    serializer_class = StoreRatingSerializer

    def get(self, request):
        store_id = request.user.store_id
        if store_id is None:
            raise ValidationError('No store associated with your account')

        queryset = (
            Rating.objects.filter(store_id=store_id)
            .select_related('user')
            .order_by('-created_at')
        )
        data = {
            'ratings': self.get_serializer(queryset, many=True).data,
            'stats': services.store_rating_stats(store_id)
        }
        return success_response(data)


class RatingStatsView(generics.GenericAPIView):
    """
    Platform-wide rating statistics.

    Endpoint:
        GET /api/ratings/stats
    """
    permission_classes = [IsUserOrAdmin]

    def get(self, request):
        return success_response(services.platform_rating_stats())
