from django.contrib import admin
from .models import AccessEvent


@admin.register(AccessEvent)
class AccessEventAdmin(admin.ModelAdmin):
    list_display = ['booking', 'access_time']
    readonly_fields = ['id', 'booking', 'access_time']
    search_fields = ['booking__employee__name', 'booking__room__name']
    date_hierarchy = 'access_time'

    def has_change_permission(self, request, obj=None):
        return False
