from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import StoreViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'stores', StoreViewSet, basename='store')

urlpatterns = [
    path('', include(router.urls)),
]
