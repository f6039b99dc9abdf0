from django.contrib import admin
from .models import Staff


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ['name', 'role', 'phone', 'email', 'amount_to_pay', 'contract_duration_months', 'created_at']
    list_filter = ['role', 'created_at']
    search_fields = ['name', 'phone', 'email', 'national_id']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']
