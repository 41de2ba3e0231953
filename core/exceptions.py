import logging

from rest_framework import exceptions, status
from rest_framework.response import Response

logger = logging.getLogger(__name__)

NON_FIELD_KEY = 'non_field_errors'

# Re-exported so callers can import every error kind from one place.
ValidationError = exceptions.ValidationError


class AuthenticationError(exceptions.AuthenticationFailed):
    """Missing, malformed or expired bearer token."""
    default_detail = 'Authentication required'


class AuthorizationError(exceptions.PermissionDenied):
    """The caller is authenticated but their role or ownership does not allow the action."""
    default_detail = 'Insufficient permissions'


class NotFoundError(exceptions.NotFound):
    default_detail = 'Resource not found'


class ConflictError(exceptions.APIException):
    """
    A business rule collision such as a duplicate email or a store that already has an owner.

    It is reported as 400 Bad Request, the same status the clients already handle for invalid
    input, but carries its own error code.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Resource already exists'
    default_code = 'conflict'


def flatten_errors(detail, field=None):
    """
    Turns DRF's nested error detail into a flat list of ``{'field', 'message'}`` dicts.

    Nested serializer errors are joined with dots, e.g. ``store.email``.
    """
    if isinstance(detail, dict):
        errors = []
        for key, value in detail.items():
            nested = key if field is None or key == NON_FIELD_KEY else f'{field}.{key}'
            errors.extend(flatten_errors(value, nested))
        return errors
    if isinstance(detail, list):
        errors = []
        for item in detail:
            errors.extend(flatten_errors(item, field))
        return errors
    return [{'field': field or NON_FIELD_KEY, 'message': str(detail)}]


def envelope_exception_handler(exc, context):
    """
    Project-wide DRF exception handler.

    Every error leaves the API in the same shape::

        {"success": false, "message": "...", "errors": [{"field": "...", "message": "..."}]}

    ``errors`` is only present for validation failures. Exceptions that DRF does not know
    how to translate are logged with their traceback and reported as a generic 500 so no
    internals leak to the client.
    """
    # rest_framework.views resolves DEFAULT_AUTHENTICATION_CLASSES on import, and the
    # authentication class imports this module.
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            'Unhandled exception in %s',
            view.__class__.__name__ if view is not None else 'unknown view',
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return Response(
            {'success': False, 'message': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        errors = flatten_errors(exc.detail)
        field_errors = [error for error in errors if error['field'] != NON_FIELD_KEY]
        if field_errors or not errors:
            message = 'Validation failed'
        else:
            message = errors[0]['message']
        response.data = {'success': False, 'message': message, 'errors': errors}
        return response

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        logger.warning('Rejected unauthenticated request: %s', detail)
    response.data = {'success': False, 'message': str(detail or exc)}
    return response
