from rest_framework import serializers
from .models import Sponsorship


class SponsorshipSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    student_access_number = serializers.CharField(source='student.access_number', read_only=True)

    class Meta:
        model = Sponsorship
        fields = [
            'id', 'student', 'student_name', 'student_access_number', 'sponsor_id', 'sponsor_name',
            'sponsor_country', 'amount', 'type', 'status', 'start_date', 'end_date', 'description',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than zero")
        return value
