from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import AdminUserViewSet, DashboardView

router = SimpleRouter(trailing_slash=False)
router.register(r'users', AdminUserViewSet, basename='admin-user')

urlpatterns = [
    path('dashboard', DashboardView.as_view(), name='admin-dashboard'),
    path('', include(router.urls)),
]
