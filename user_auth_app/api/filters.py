import django_filters

from user_auth_app.models import User


class UserFilter(django_filters.FilterSet):
    """
    Query parameter filtering for the admin user list.

    Text filters are case-insensitive substring matches; `role` must match exactly.
    """
    name = django_filters.CharFilter(lookup_expr='icontains')
    email = django_filters.CharFilter(lookup_expr='icontains')
    address = django_filters.CharFilter(lookup_expr='icontains')
    role = django_filters.ChoiceFilter(choices=User.Role.choices)

    class Meta:
        model = User
        fields = ['name', 'email', 'address', 'role']
