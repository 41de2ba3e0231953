import logging

from django.db import transaction
from django.db.models import OuterRef, Subquery
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.filters import SearchFilter
from rest_framework.permissions import IsAuthenticated

from core.exceptions import AuthorizationError, ConflictError, NotFoundError
from core.filters import SortByOrderingFilter
from core.responses import success_response
from ratings_app.api.serializers import StoreRatingSerializer
from ratings_app.models import Rating
from stores_app.models import Store
from user_auth_app.api.permissions import IsAdmin, IsStoreOwnerOrAdmin
from user_auth_app.models import User
from .filters import StoreFilter
from .serializers import StoreSerializer, StoreWriteSerializer, UserStoreSerializer

logger = logging.getLogger(__name__)

OWNER_HAS_STORE_MESSAGE = 'You already have a store associated with your account'


class StoreViewSet(viewsets.ModelViewSet):
    """
    Manages stores.

    This ViewSet provides the following endpoints:
    - `GET /api/stores`: Lists stores with filtering, searching and sorting.
    - `POST /api/stores`: Creates a store (store owners and admins).
    - `GET /api/stores/{id}`: Retrieves a store with role-dependent extras.
    - `PUT/PATCH /api/stores/{id}`: Updates a store (admins).
    - `DELETE /api/stores/{id}`: Deletes a store and its ratings (admins).
    - `GET /api/stores/{id}/ratings`: Lists the ratings of a store.

    What a response contains depends on the caller's role: users see their own rating of
    each store, admins and the owning store owner see the individual ratings.
    """
    lookup_value_regex = r'\d+'
    filter_backends = [DjangoFilterBackend, SearchFilter, SortByOrderingFilter]
    filterset_class = StoreFilter
    search_fields = ['name', 'address']
    ordering_fields = ['name', 'email', 'address', 'average_rating', 'total_ratings', 'created_at']
    ordering = ['-average_rating', '-total_ratings', 'name']

    def get_permissions(self):
        """
        Instantiates and returns the list of permissions that this view requires,
        depending on the action being performed.

        - 'create': store owners and admins may create a store.
        - 'update', 'partial_update', 'destroy': only admins may change or delete a store.
        - everything else ('list', 'retrieve', 'ratings'): any authenticated user.

        Returns:
            list: A list of permission instances.
        """
        if self.action == 'create':
            self.permission_classes = [IsStoreOwnerOrAdmin]
        elif self.action in ['update', 'partial_update', 'destroy']:
            self.permission_classes = [IsAdmin]
        else:
            # Whether a store owner may see the ratings of a store is decided per object.
            self.permission_classes = [IsAuthenticated]
        return super().get_permissions()

    def get_queryset(self):
        """
        Returns the stores visible to the requesting user.

        For accounts with the `user` role each store is annotated with that user's own rating
        and the date it was given, so the list can show both without a query per store.

        Returns:
            QuerySet: The stores, with the owner joined in.
        """
        queryset = Store.objects.select_related('owner')
        user = self.request.user

        if user.is_authenticated and user.is_regular_user:
            own_rating = Rating.objects.filter(store=OuterRef('pk'), user=user)
            queryset = queryset.annotate(
                user_rating=Subquery(own_rating.values('rating')[:1]),
                rating_date=Subquery(own_rating.values('created_at')[:1])
            )
        return queryset

    def get_serializer_class(self):
        """
        Returns the serializer class for the current action and role.

        Returns:
            Serializer: `StoreWriteSerializer` for writes, `UserStoreSerializer` for reads by
            regular users (it adds their own rating), `StoreSerializer` otherwise.
        """
        if self.action in ['create', 'update', 'partial_update']:
            return StoreWriteSerializer
        if self.request.user.is_authenticated and self.request.user.is_regular_user:
            return UserStoreSerializer
        return StoreSerializer

    def get_object(self):
        """
        Retrieves the store addressed by the URL.

        Raises:
            NotFoundError: If no store with this id exists.

        Returns:
            Store: The store, annotated like the list.
        """
        try:
            store = self.get_queryset().get(pk=self.kwargs['pk'])
        except Store.DoesNotExist:
            raise NotFoundError('Store not found')
        self.check_object_permissions(self.request, store)
        return store

    def can_view_ratings(self, store):
        """
        Checks whether the requesting user may see the individual ratings of a store.

        Args:
            store (Store): The store being looked at.

        Returns:
            bool: True for admins and for the store owner linked to this store.
        """
        user = self.request.user
        return user.is_admin or (user.is_store_owner and user.store_id == store.id)

    def store_ratings(self, store):
        """Serializes a store's ratings, newest first."""
        ratings = Rating.objects.filter(store=store).select_related('user').order_by('-created_at')
        return StoreRatingSerializer(ratings, many=True).data

    def list(self, request, *args, **kwargs):
        """
        Lists the stores after filtering, searching and sorting.

        Returns:
            Response: The stores and their count.
        """
        queryset = self.filter_queryset(self.get_queryset())
        stores = self.get_serializer(queryset, many=True).data
        return success_response({'stores': stores, 'total': len(stores)})

    def retrieve(self, request, *args, **kwargs):
        """
        Retrieves one store with the extras the requesting role is entitled to.

        - Regular users also get `userRating`, their own rating or None.
        - Admins and the owning store owner also get the individual `ratings`.

        Returns:
            Response: The store and the role-dependent extras.
        """
        store = self.get_object()
        data = {'store': self.get_serializer(store).data}

        if request.user.is_regular_user:
            rating = Rating.objects.filter(store=store, user=request.user).first()
            data['userRating'] = (
                {'id': rating.id, 'rating': rating.rating, 'created_at': rating.created_at}
                if rating else None
            )

        if self.can_view_ratings(store):
            data['ratings'] = self.store_ratings(store)

        return success_response(data)

    def create(self, request, *args, **kwargs):
        """
        Creates a store.

        A store owner may own a single store; the new store is linked to them in the same
        transaction. The owner's row is re-read under a lock so two simultaneous requests
        cannot both pass the single-store check.

        Returns:
            Response: 201 with the new store, or 400 if the owner already has a store.
        """
        user = request.user
        if user.is_store_owner and user.store_id is not None:
            raise ConflictError(OWNER_HAS_STORE_MESSAGE)

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            if user.is_store_owner:
                # The instance attached to the request may be stale by now.
                owner = User.objects.select_for_update().get(pk=user.pk)
                if owner.store_id is not None:
                    raise ConflictError(OWNER_HAS_STORE_MESSAGE)
            store = serializer.save()
            if user.is_store_owner:
                owner.store = store
                owner.save(update_fields=['store', 'updated_at'])

        logger.info('Store id=%s created by user id=%s', store.id, user.id)
        return success_response(
            {'store': StoreSerializer(store).data},
            'Store created successfully',
            status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        """
        Updates a store. Only admins reach this method.

        Returns:
            Response: The updated store.
        """
        # Both PUT and PATCH only touch the fields that were sent.
        store = self.get_object()
        serializer = self.get_serializer(store, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        store = serializer.save()

        return success_response(
            {'store': StoreSerializer(store).data},
            'Store updated successfully'
        )

    def destroy(self, request, *args, **kwargs):
        """
        Deletes a store. Its ratings go with it, and its owner is left without a store.
        """
        store = self.get_object()
        store_id = store.id
        self.perform_destroy(store)
        logger.info('Store id=%s deleted by user id=%s', store_id, request.user.id)
        return success_response(message='Store deleted successfully')

    @action(detail=True, methods=['get'])
    def ratings(self, request, pk=None):
        """
        Lists a store's ratings with a short summary of the store.

        Store owners may only look at their own store.
        """
        store = self.get_object()
        user = request.user
        if user.is_store_owner and user.store_id != store.id:
            raise AuthorizationError('Access denied - you can only view ratings for your own store')

        data = {
            'store': {
                'id': store.id,
                'name': store.name,
                'average_rating': store.average_rating,
                'total_ratings': store.total_ratings,
            },
            'ratings': self.store_ratings(store)
        }
        return success_response(data)
