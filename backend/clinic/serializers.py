from rest_framework import serializers
from .models import ClinicRecord


class ClinicRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = ClinicRecord
        fields = [
            'id', 'student_id', 'access_number', 'student_name', 'class_name', 'stream_name',
            'visit_date', 'visit_time', 'symptoms', 'diagnosis', 'treatment', 'medication', 'cost',
            'nurse_id', 'nurse_name', 'follow_up_required', 'follow_up_date', 'parent_notified',
            'status', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']


class ClinicRecordUpdateSerializer(serializers.ModelSerializer):
    """Fields a nurse may change after the visit is recorded"""
    class Meta:
        model = ClinicRecord
        fields = [
            'symptoms', 'diagnosis', 'treatment', 'medication', 'cost',
            'follow_up_required', 'follow_up_date', 'parent_notified', 'status', 'notes'
        ]
