import re

from django.core.exceptions import ValidationError

SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400


class PasswordComplexityValidator:
    """
    Django password validator enforcing the platform's password policy.

    A password must be `min_length` to `max_length` characters long and contain at least one
    uppercase letter and one special character. Registered in `AUTH_PASSWORD_VALIDATORS`, so
    `django.contrib.auth.password_validation.validate_password` applies it everywhere.
    """

    def __init__(self, min_length=8, max_length=16):
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, password, user=None):
        errors = []
        if not self.min_length <= len(password) <= self.max_length:
            errors.append(ValidationError(
                f'Password must be between {self.min_length} and {self.max_length} characters',
                code='password_length',
            ))
        if not re.search(r'[A-Z]', password):
            errors.append(ValidationError(
                'Password must contain at least one uppercase letter',
                code='password_no_upper',
            ))
        if not any(char in SPECIAL_CHARACTERS for char in password):
            errors.append(ValidationError(
                'Password must contain at least one special character',
                code='password_no_special',
            ))
        if errors:
            raise ValidationError(errors)

    def get_help_text(self):
        return (
            f'Your password must be {self.min_length} to {self.max_length} characters long and '
            f'contain at least one uppercase letter and one special character.'
        )
