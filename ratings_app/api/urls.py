from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import (
    MyRatingListView,
    MyStoreSummaryView,
    RatingStatsView,
    RatingViewSet,
    StoreRatingListView,
    UserRatingListView,
    UserStoreRatingView,
)

router = SimpleRouter(trailing_slash=False)
router.register(r'ratings', RatingViewSet, basename='rating')

urlpatterns = [
    path('ratings/store/<int:store_id>', StoreRatingListView.as_view(), name='ratings-by-store'),
    path('ratings/user/<int:user_id>', UserRatingListView.as_view(), name='user-ratings'),
    path(
        'ratings/user/<int:user_id>/store/<int:store_id>',
        UserStoreRatingView.as_view(),
        name='user-store-rating'
    ),
    path('ratings/my-ratings', MyRatingListView.as_view(), name='my-ratings'),
    path('ratings/my-store/summary', MyStoreSummaryView.as_view(), name='my-store-summary'),
    path('ratings/stats', RatingStatsView.as_view(), name='rating-stats'),
    path('', include(router.urls)),
]
