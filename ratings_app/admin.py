from django.contrib import admin

from .models import Rating


class RatingAdmin(admin.ModelAdmin):
    list_display = ('id', 'store', 'user', 'rating', 'created_at', 'updated_at')
    list_filter = ('rating',)
    search_fields = ('store__name', 'user__email', 'user__name')
    list_select_related = ('store', 'user')


admin.site.register(Rating, RatingAdmin)
