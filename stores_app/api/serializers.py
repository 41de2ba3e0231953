from rest_framework import serializers

from core.exceptions import ConflictError
from stores_app.models import Store
from user_auth_app.validators import ADDRESS_MAX_LENGTH


class StoreSerializer(serializers.ModelSerializer):
    """
    Read representation of a store, including its owner's contact details if it has one.

    `average_rating` and `total_ratings` are the aggregates maintained by the rating services.
    """
    owner_id = serializers.SerializerMethodField()
    owner_name = serializers.SerializerMethodField()
    owner_email = serializers.SerializerMethodField()

    class Meta:
        model = Store
        fields = [
            'id',
            'name',
            'email',
            'address',
            'average_rating',
            'total_ratings',
            'owner_id',
            'owner_name',
            'owner_email',
            'created_at',
            'updated_at'
        ]
        read_only_fields = fields

    def _owner(self, obj):
        # The reverse one-to-one raises an AttributeError subclass when there is no owner.
        return getattr(obj, 'owner', None)

    def get_owner_id(self, obj):
        owner = self._owner(obj)
        return owner.id if owner else None

    def get_owner_name(self, obj):
        owner = self._owner(obj)
        return owner.name if owner else None

    def get_owner_email(self, obj):
        owner = self._owner(obj)
        return owner.email if owner else None


class UserStoreSerializer(StoreSerializer):
    """
    Store representation for the `user` role.

    Adds the requesting user's own rating (`user_rating`, `rating_date`), which the view
    annotates onto the queryset; both are `null` if the user has not rated the store.
    """
    user_rating = serializers.IntegerField(read_only=True, allow_null=True)
    rating_date = serializers.DateTimeField(read_only=True, allow_null=True)

    class Meta(StoreSerializer.Meta):
        fields = StoreSerializer.Meta.fields + ['user_rating', 'rating_date']
        read_only_fields = fields


class StoreWriteSerializer(serializers.ModelSerializer):
    """
    Validates store creation and updates.

    Input Fields:
        - name (str): Required, up to 255 characters.
        - email (str): Must not be used by another store.
        - address (str): Required, up to 400 characters.
    """
    name = serializers.CharField(
        max_length=255,
        error_messages={
            'blank': 'Store name is required',
            'required': 'Store name is required',
            'max_length': 'Store name must not exceed 255 characters',
        }
    )
    email = serializers.EmailField(
        error_messages={'invalid': 'Please provide a valid email address'}
    )
    address = serializers.CharField(
        max_length=ADDRESS_MAX_LENGTH,
        error_messages={
            'blank': 'Address is required',
            'required': 'Address is required',
            'max_length': f'Address must not exceed {ADDRESS_MAX_LENGTH} characters',
        }
    )

    class Meta:
        model = Store
        fields = ['name', 'email', 'address']

    def validate_email(self, value):
        value = value.lower()
        existing = Store.objects.filter(email=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise ConflictError('Store with this email already exists')
        return value
