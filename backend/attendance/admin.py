from django.contrib import admin
from .models import Attendance


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['student_id', 'date', 'time', 'status', 'teacher_name', 'notification_sent']
    list_filter = ['status', 'date', 'notification_sent']
    search_fields = ['student_id', 'teacher_name', 'remarks']
    ordering = ['-date']
