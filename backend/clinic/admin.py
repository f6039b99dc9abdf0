from django.contrib import admin
from .models import ClinicRecord


@admin.register(ClinicRecord)
class ClinicRecordAdmin(admin.ModelAdmin):
    list_display = ['student_name', 'access_number', 'class_name', 'visit_date', 'diagnosis', 'nurse_name', 'status', 'follow_up_required']
    list_filter = ['status', 'follow_up_required', 'parent_notified', 'class_name', 'visit_date']
    search_fields = ['student_name', 'access_number', 'diagnosis', 'symptoms']
    ordering = ['-visit_date']
