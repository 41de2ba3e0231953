import django_filters

from ..models import Rating


class RatingFilter(django_filters.FilterSet):
    """
    Query parameter filtering for rating lists.

    The parameter names follow the API's camelCase convention, e.g.
    `/api/ratings/store/3?minRating=4`.
    """
    storeId = django_filters.NumberFilter(field_name='store_id')
    minRating = django_filters.NumberFilter(field_name='rating', lookup_expr='gte')
    maxRating = django_filters.NumberFilter(field_name='rating', lookup_expr='lte')

    class Meta:
        model = Rating
        fields = ['storeId', 'minRating', 'maxRating']
