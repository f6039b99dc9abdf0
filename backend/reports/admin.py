from django.contrib import admin
from .models import WeeklyReport


@admin.register(WeeklyReport)
class WeeklyReportAdmin(admin.ModelAdmin):
    list_display = ['user_name', 'user_role', 'week_start', 'week_end', 'status', 'submitted_at']
    list_filter = ['status', 'user_role', 'report_type']
    search_fields = ['user_name', 'content']
    ordering = ['-submitted_at']
