from django.contrib import admin

from .models import Store


class StoreAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'email', 'address', 'average_rating', 'total_ratings', 'created_at')
    search_fields = ('name', 'email', 'address')
    # The aggregates are maintained by the rating services.
    readonly_fields = ('average_rating', 'total_ratings', 'created_at', 'updated_at')


admin.site.register(Store, StoreAdmin)
