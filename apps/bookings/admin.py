from django.contrib import admin
from .models import ApprovalRecord, Booking, BookingStatusLog


class BookingStatusLogInline(admin.TabularInline):
    model = BookingStatusLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    can_delete = False


class ApprovalRecordInline(admin.StackedInline):
    model = ApprovalRecord
    extra = 0
    readonly_fields = ['approver', 'decision', 'reason', 'decided_at', 'created_at']
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Status is read-only here: transitions go through the booking engine."""
    list_display = ['short_id', 'employee', 'room', 'start_time', 'end_time', 'status']
    list_filter = ['status', 'room']
    search_fields = ['employee__name', 'employee__email', 'room__name']
    readonly_fields = [
        'id', 'status', 'secret', 'cancellation_reason', 'created_at', 'updated_at',
    ]
    date_hierarchy = 'start_time'
    inlines = [ApprovalRecordInline, BookingStatusLogInline]
    fieldsets = (
        ('Booking', {'fields': ('id', 'employee', 'room')}),
        ('Schedule', {'fields': ('start_time', 'end_time')}),
        ('Status', {'fields': ('status', 'cancellation_reason')}),
        ('Access', {'fields': ('secret',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def short_id(self, obj):
        return obj.id_short
    short_id.short_description = 'ID'


@admin.register(BookingStatusLog)
class BookingStatusLogAdmin(admin.ModelAdmin):
    list_display = ['booking', 'from_status', 'to_status', 'changed_by', 'changed_at']
    readonly_fields = ['id', 'booking', 'from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    search_fields = ['booking__employee__name', 'changed_by']
