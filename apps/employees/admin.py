from django.contrib import admin
from .models import Employee, UnlockRequest


class UnlockRequestInline(admin.TabularInline):
    model = UnlockRequest
    fk_name = 'employee'
    extra = 0
    readonly_fields = ['request_time', 'status', 'reason', 'approver', 'decision_reason', 'decision_time']
    can_delete = False


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    """Lock state is read-only here: use lock_policy so an unlock request is kept."""
    list_display = ['name', 'email', 'is_admin', 'is_locked']
    list_filter = ['is_admin', 'is_locked']
    search_fields = ['name', 'email']
    readonly_fields = ['id', 'is_locked', 'created_at', 'updated_at']
    inlines = [UnlockRequestInline]


@admin.register(UnlockRequest)
class UnlockRequestAdmin(admin.ModelAdmin):
    list_display = ['employee', 'request_time', 'status', 'approver', 'decision_time']
    list_filter = ['status']
    search_fields = ['employee__name', 'employee__email']
    readonly_fields = [
        'id', 'employee', 'request_time', 'status', 'reason',
        'approver', 'decision_reason', 'decision_time',
    ]
