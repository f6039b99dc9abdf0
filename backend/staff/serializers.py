from rest_framework import serializers
from .models import Staff


class StaffSerializer(serializers.ModelSerializer):
    has_cv = serializers.SerializerMethodField()
    has_passport_photo = serializers.SerializerMethodField()

    class Meta:
        model = Staff
        fields = [
            'id', 'name', 'phone', 'email', 'role', 'date_of_birth', 'village',
            'next_of_kin', 'next_of_kin_phone', 'national_id', 'medical_issues',
            'contract_duration_months', 'amount_to_pay', 'hr_notes',
            'bank_account_name', 'bank_account_number', 'bank_name', 'bank_branch',
            'mobile_money_number', 'mobile_money_provider',
            'cv_file', 'cv_file_type', 'has_cv', 'passport_photo', 'passport_photo_type', 'has_passport_photo',
            'attachments', 'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['cv_file', 'cv_file_type', 'passport_photo', 'passport_photo_type', 'created_at', 'updated_at']

    def get_has_cv(self, obj):
        return bool(obj.cv_file)

    def get_has_passport_photo(self, obj):
        return bool(obj.passport_photo)

    def validate_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError('Name is required')
        return value.strip()
