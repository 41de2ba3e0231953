from rest_framework import status as http_status
from rest_framework.response import Response


def success_response(data=None, message=None, status=http_status.HTTP_200_OK):
    """
    Wraps a payload in the success envelope shared by all endpoints.

    Produces ``{"success": true, "message": ..., "data": ...}`` and omits the keys that were
    not given.
    """
    body = {'success': True}
    if message is not None:
        body['message'] = message
    if data is not None:
        body['data'] = data
    return Response(body, status=status)
