from django.contrib import admin
from .models import Student, DroppedAccessNumber


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['name', 'access_number', 'admission_id', 'class_name', 'stream', 'status', 'sponsorship_status', 'admitted_by', 'created_at']
    list_filter = ['class_name', 'stream', 'status', 'sponsorship_status', 'admitted_by', 'residence_type']
    search_fields = ['name', 'access_number', 'admission_id', 'parent_name']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(DroppedAccessNumber)
class DroppedAccessNumberAdmin(admin.ModelAdmin):
    list_display = ['access_number', 'class_name', 'stream_name', 'reason', 'dropped_at']
    list_filter = ['class_name', 'stream_name']
    search_fields = ['access_number']
    ordering = ['dropped_at']
