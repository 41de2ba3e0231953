from django.contrib.auth import authenticate
from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from core.exceptions import AuthenticationError, ConflictError
from stores_app.models import Store
from user_auth_app.models import User
from user_auth_app.validators import ADDRESS_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH


NAME_LENGTH_MESSAGE = f'Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters'
ADDRESS_LENGTH_MESSAGE = f'Address must not exceed {ADDRESS_MAX_LENGTH} characters'


def check_password_policy(password, user=None):
    """
    Runs the configured Django password validators and re-raises failures as a DRF error.
    """
    try:
        password_validation.validate_password(password, user)
    except DjangoValidationError as exc:
        raise serializers.ValidationError(list(exc.messages))
    return password


def name_field(**kwargs):
    return serializers.CharField(
        min_length=NAME_MIN_LENGTH,
        max_length=NAME_MAX_LENGTH,
        error_messages={
            'min_length': NAME_LENGTH_MESSAGE,
            'max_length': NAME_LENGTH_MESSAGE,
        },
        **kwargs
    )


def address_field(**kwargs):
    return serializers.CharField(
        max_length=ADDRESS_MAX_LENGTH,
        error_messages={
            'max_length': ADDRESS_LENGTH_MESSAGE,
            'blank': 'Address is required',
            'required': 'Address is required',
        },
        **kwargs
    )


class UniqueEmailMixin:
    """
    Normalises the `email` field to lower case and rejects addresses already in use.

    A duplicate is a business-rule collision, so it is raised as `ConflictError` rather than a
    field validation error.
    """

    def validate_email(self, value):
        value = value.lower()
        existing = User.objects.filter(email=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise ConflictError('User with this email already exists')
        return value


class UserSerializer(serializers.ModelSerializer):
    """
    Read-only representation of a user, as embedded in auth and admin responses.

    The password hash is never exposed.
    """
    store_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'email',
            'address',
            'role',
            'store_id',
            'created_at',
            'updated_at'
        ]
        read_only_fields = fields


class UserDetailSerializer(UserSerializer):
    """Adds the linked store's name and rating for the admin user views."""
    store_name = serializers.SerializerMethodField()
    store_rating = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['store_name', 'store_rating']
        read_only_fields = fields

    def get_store_name(self, obj):
        return obj.store.name if obj.store_id else None

    def get_store_rating(self, obj):
        return obj.store.average_rating if obj.store_id else None


class RegistrationSerializer(UniqueEmailMixin, serializers.ModelSerializer):
    """
    Handles self-service sign up.

    Input Fields:
        - name (str): 20 to 60 characters.
        - email (str): Must not be in use yet.
        - password (str): Must satisfy the password policy.
        - address (str): Up to 400 characters.

    Every self-registered account gets the `user` role; other roles are only assigned by an
    administrator.
    """
    name = name_field()
    email = serializers.EmailField(
        error_messages={'invalid': 'Please provide a valid email address'}
    )
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )
    address = address_field()

    class Meta:
        model = User
        fields = ['name', 'email', 'password', 'address']

    def validate_password(self, value):
        return check_password_policy(value)

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
            address=validated_data['address'],
            role=User.Role.USER
        )


class LoginSerializer(serializers.Serializer):
    """
    Authenticates a user by email and password.

    On success the authenticated user is added to the validated data under `user`. Bad
    credentials raise `AuthenticationError` (401) with a message that does not reveal whether
    the email exists.
    """
    email = serializers.EmailField(
        error_messages={'invalid': 'Please provide a valid email address'}
    )
    password = serializers.CharField(
        style={'input_type': 'password'},
        trim_whitespace=False,
        error_messages={'blank': 'Password is required'}
    )

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get('request'),
            email=attrs['email'].lower(),
            password=attrs['password']
        )
        if user is None:
            raise AuthenticationError('Invalid email or password')

        attrs['user'] = user
        return attrs


class PasswordUpdateSerializer(serializers.Serializer):
    """Changes the password of the requesting user after confirming the current one."""
    currentPassword = serializers.CharField(
        trim_whitespace=False,
        error_messages={'blank': 'Current password is required'}
    )
    newPassword = serializers.CharField(trim_whitespace=False)

    def validate_newPassword(self, value):
        return check_password_policy(value, self.context['request'].user)

    def validate(self, attrs):
        user = self.context['request'].user
        if not user.check_password(attrs['currentPassword']):
            raise serializers.ValidationError('Current password is incorrect')
        return attrs

    def save(self, **kwargs):
        user = self.context['request'].user
        user.set_password(self.validated_data['newPassword'])
        user.save(update_fields=['password', 'updated_at'])
        return user


class StoreOwnershipMixin:
    """
    Validates the `store` link of an account managed by an administrator.

    Only store owners may be linked to a store, and a store may have a single owner.
    """

    def validate(self, attrs):
        attrs = super().validate(attrs)
        role = attrs.get('role', getattr(self.instance, 'role', User.Role.USER))
        store = attrs.get('store', getattr(self.instance, 'store', None))

        if role != User.Role.STORE_OWNER:
            if attrs.get('store') is not None:
                raise serializers.ValidationError(
                    {'store_id': 'Only store owners can be linked to a store'}
                )
            # A user who stops being a store owner loses the link.
            attrs['store'] = None
            return attrs

        if store is not None:
            owners = User.objects.filter(store=store)
            if self.instance is not None:
                owners = owners.exclude(pk=self.instance.pk)
            if owners.exists():
                raise ConflictError('Store already has an owner')
        return attrs


def store_id_field():
    return serializers.PrimaryKeyRelatedField(
        source='store',
        queryset=Store.objects.all(),
        allow_null=True,
        required=False,
        error_messages={'does_not_exist': 'Invalid store ID'}
    )


class AdminUserCreateSerializer(StoreOwnershipMixin, UniqueEmailMixin, serializers.ModelSerializer):
    """Lets an administrator create an account with any role."""
    name = name_field()
    email = serializers.EmailField(
        error_messages={'invalid': 'Please provide a valid email address'}
    )
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    address = address_field()
    role = serializers.ChoiceField(
        choices=User.Role.choices,
        error_messages={'invalid_choice': 'Role must be admin, user, or store_owner'}
    )
    store_id = store_id_field()

    class Meta:
        model = User
        fields = ['name', 'email', 'password', 'address', 'role', 'store_id']

    def validate_password(self, value):
        return check_password_policy(value)

    def create(self, validated_data):
        extra = {'is_staff': validated_data['role'] == User.Role.ADMIN}
        return User.objects.create_user(**validated_data, **extra)


class AdminUserUpdateSerializer(StoreOwnershipMixin, UniqueEmailMixin, serializers.ModelSerializer):
    """
    Lets an administrator edit an existing account.

    All fields are optional; passwords are changed by the owner through the auth endpoints.
    """
    name = name_field(required=False)
    email = serializers.EmailField(required=False)
    address = address_field(required=False)
    role = serializers.ChoiceField(
        choices=User.Role.choices,
        required=False,
        error_messages={'invalid_choice': 'Role must be admin, user, or store_owner'}
    )
    store_id = store_id_field()

    class Meta:
        model = User
        fields = ['name', 'email', 'address', 'role', 'store_id']

    def update(self, instance, validated_data):
        if 'role' in validated_data:
            instance.is_staff = validated_data['role'] == User.Role.ADMIN
        return super().update(instance, validated_data)
