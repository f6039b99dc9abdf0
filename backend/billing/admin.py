from django.contrib import admin
from .models import BillingType, FeeStructure, FinancialRecord, ExchangeRate


@admin.register(BillingType)
class BillingTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'class_name', 'amount', 'frequency', 'term', 'year']
    list_filter = ['class_name', 'term', 'year']
    search_fields = ['name', 'class_name']
    ordering = ['class_name', 'name']


@admin.register(FeeStructure)
class FeeStructureAdmin(admin.ModelAdmin):
    list_display = ['class_name', 'fee_name', 'amount', 'term', 'year', 'is_active']
    list_filter = ['class_name', 'term', 'year', 'is_active']
    search_fields = ['fee_name', 'class_name']


@admin.register(FinancialRecord)
class FinancialRecordAdmin(admin.ModelAdmin):
    list_display = ['receipt_number', 'student_id', 'type', 'billing_type', 'amount', 'status', 'term', 'year', 'date']
    list_filter = ['type', 'status', 'term', 'year', 'payment_method']
    search_fields = ['receipt_number', 'student_id', 'billing_type', 'description']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(ExchangeRate)
class ExchangeRateAdmin(admin.ModelAdmin):
    list_display = ['from_currency', 'to_currency', 'rate', 'effective_date']
    list_filter = ['from_currency', 'to_currency']
