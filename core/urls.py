"""
URL configuration for the store rating API.

Every resource lives below ``/api/`` and the routes have no trailing slash.
"""
from django.contrib import admin
from django.urls import path, include

from .views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health', HealthCheckView.as_view(), name='health'),
    path('api/auth/', include('user_auth_app.api.urls')),
    path('api/admin/', include('admin_app.api.urls')),
    path('api/', include('stores_app.api.urls')),
    path('api/', include('ratings_app.api.urls')),
]
