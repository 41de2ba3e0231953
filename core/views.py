from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthCheckView(APIView):
    """
    Public liveness endpoint.

    Endpoint:
        GET /api/health
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, format=None):
        data = {
            'success': True,
            'message': 'Store Rating System API is running',
            'timestamp': timezone.now().isoformat(),
        }
        return Response(data, status=status.HTTP_200_OK)
