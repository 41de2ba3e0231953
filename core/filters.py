from rest_framework.filters import OrderingFilter


class SortByOrderingFilter(OrderingFilter):
    """
    Ordering backend driven by the `sortBy` and `sortOrder` query parameters.

    `sortBy` must name one of the view's `ordering_fields`; anything else falls back to the
    view's default `ordering`. `sortOrder` is `asc` (default) or `desc`.

    Example: `/api/stores?sortBy=average_rating&sortOrder=desc`
    """
    sort_param = 'sortBy'
    order_param = 'sortOrder'

    def get_ordering(self, request, queryset, view):
        field = request.query_params.get(self.sort_param)
        if field:
            valid_fields = [item[0] for item in self.get_valid_fields(queryset, view, {'request': request})]
            if field in valid_fields:
                descending = request.query_params.get(self.order_param, 'asc').lower() == 'desc'
                return ['-' + field if descending else field]
        return self.get_default_ordering(view)

    def get_schema_operation_parameters(self, view):
        return []
