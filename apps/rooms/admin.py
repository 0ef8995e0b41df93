from django.contrib import admin
from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'capacity', 'room_type', 'is_disabled']
    list_filter = ['room_type', 'is_disabled']
    search_fields = ['name', 'location']
    list_editable = ['is_disabled']
    readonly_fields = ['id', 'created_at', 'updated_at']
    fieldsets = (
        ('Room Info', {'fields': ('id', 'name', 'location', 'capacity', 'room_type')}),
        ('Status', {'fields': ('is_disabled',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
