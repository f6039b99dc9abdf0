from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, UserPrivilege, Notification, SchoolSettings, AuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'name', 'role', 'status', 'account_locked', 'is_active', 'last_login']
    list_filter = ['role', 'status', 'account_locked', 'is_active', 'is_staff']
    search_fields = ['username', 'email', 'name']
    ordering = ['name']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('School', {'fields': ('name', 'phone', 'role', 'status', 'student_ids')}),
        ('Lock state', {'fields': ('password_attempts', 'last_password_attempt', 'locked_until',
                                   'account_locked', 'lock_reason', 'first_time_login')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('School', {'fields': ('email', 'name', 'role')}),
    )


@admin.register(UserPrivilege)
class UserPrivilegeAdmin(admin.ModelAdmin):
    list_display = ['user', 'privilege', 'assigned_at', 'expires_at']
    list_filter = ['privilege']
    search_fields = ['user__email', 'privilege']


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['user', 'title', 'type', 'read', 'date']
    list_filter = ['type', 'read']
    search_fields = ['title', 'message', 'user__email']


@admin.register(SchoolSettings)
class SchoolSettingsAdmin(admin.ModelAdmin):
    list_display = ['school_name', 'current_year', 'current_term', 'updated_at']
    readonly_fields = ['updated_at']


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'action', 'model_name', 'object_id', 'object_name', 'ip_address', 'created_at']
    list_filter = ['action', 'model_name', 'created_at']
    search_fields = ['user__username', 'model_name', 'object_id', 'object_reference']
    ordering = ['-created_at']
    readonly_fields = ['user', 'action', 'model_name', 'object_id', 'changes', 'ip_address', 'created_at']
