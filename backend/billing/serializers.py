from rest_framework import serializers
from .models import BillingType, FeeStructure, FinancialRecord, ExchangeRate


class BillingTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillingType
        fields = ['id', 'name', 'amount', 'frequency', 'term', 'year', 'class_name', 'description', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class FeeStructureSerializer(serializers.ModelSerializer):
    class Meta:
        model = FeeStructure
        fields = ['id', 'class_name', 'fee_name', 'amount', 'frequency', 'term', 'year', 'description', 'is_active', 'created_at']


class FinancialRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = FinancialRecord
        fields = [
            'id', 'student_id', 'type', 'billing_type', 'billing_amount', 'amount', 'description',
            'date', 'payment_date', 'payment_time', 'payment_method', 'status', 'receipt_number',
            'balance', 'term', 'year', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {'date': {'required': False}}


class ExchangeRateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExchangeRate
        fields = ['id', 'from_currency', 'to_currency', 'rate', 'effective_date']
        read_only_fields = ['effective_date']

    def validate_rate(self, value):
        if value <= 0:
            raise serializers.ValidationError('Rate must be greater than zero')
        return value
