from rest_framework import serializers
from .models import Attendance


class AttendanceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Attendance
        fields = ['id', 'student_id', 'date', 'time', 'status', 'teacher_id', 'teacher_name', 'remarks', 'notification_sent', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
