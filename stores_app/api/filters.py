import django_filters

from stores_app.models import Store


class StoreFilter(django_filters.FilterSet):
    """
    Query parameter filtering for the store list.

    Attributes:
        name, email, address: Case-insensitive substring matches.
        minRating: Stores whose `average_rating` is at least the value.
        hasUserRating: Only for the `user` role; `true` keeps stores the requesting user has
            rated, `false` the ones they have not. Ignored for other roles.
    """
    name = django_filters.CharFilter(lookup_expr='icontains')
    email = django_filters.CharFilter(lookup_expr='icontains')
    address = django_filters.CharFilter(lookup_expr='icontains')
    minRating = django_filters.NumberFilter(field_name='average_rating', lookup_expr='gte')
    hasUserRating = django_filters.BooleanFilter(method='filter_has_user_rating')

    class Meta:
        model = Store
        fields = ['name', 'email', 'address', 'minRating', 'hasUserRating']

    def filter_has_user_rating(self, queryset, name, value):
        if 'user_rating' not in queryset.query.annotations:
            return queryset
        return queryset.filter(user_rating__isnull=not value)
