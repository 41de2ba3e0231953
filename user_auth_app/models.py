from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MaxLengthValidator, MinLengthValidator
from django.db import models


class UserManager(BaseUserManager):
    """
    Manager for the email-based `User` model.

    Django's default manager expects a username; this one uses the email address as the login
    identifier and always stores it in lower case so lookups are case-insensitive.
    """
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError('The email address must be set.')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', User.Role.USER)
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', User.Role.ADMIN)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self._create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    An account on the platform.

    Every account has exactly one role. Administrators manage users and stores, regular users
    rate stores and store owners look after the single store linked through `store`.

    Attributes:
        name (CharField): Full name, between 20 and 60 characters.
        email (EmailField): Unique login identifier, stored in lower case.
        address (CharField): Postal address, up to 400 characters.
        role (CharField): One of `Role`.
        store (OneToOneField): The store owned by a store owner. Being one-to-one, a store can
            never have two owners. Cleared when the store is deleted.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Administrator'
        USER = 'user', 'User'
        STORE_OWNER = 'store_owner', 'Store owner'

    name = models.CharField(
        max_length=60,
        validators=[MinLengthValidator(20), MaxLengthValidator(60)],
        help_text="Full name, 20 to 60 characters."
    )
    email = models.EmailField(unique=True, max_length=255)
    address = models.CharField(max_length=400)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.USER, db_index=True)
    store = models.OneToOneField(
        'stores_app.Store',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='owner',
        help_text="The store this user owns. Only set for store owners."
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name', 'address']

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_store_owner(self):
        return self.role == self.Role.STORE_OWNER

    @property
    def is_regular_user(self):
        return self.role == self.Role.USER
