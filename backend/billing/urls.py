from django.urls import path
from .views import (
    billing_type_list_create, billing_type_detail,
    fee_structure_list, fee_structure_for_class, fee_structure_sync, fee_structure_purge_rebuild,
    payment_process, payment_student_list, payment_summary, payment_clear_all,
    financial_record_list_create, financial_record_student, financial_record_detail, financial_record_summary,
    currency_list, exchange_rate_list_create, currency_convert
)

urlpatterns = [
    # Billing type endpoints
    path('settings/billing-types/', billing_type_list_create, name='billing-type-list-create'),
    path('settings/billing-types/<int:pk>/', billing_type_detail, name='billing-type-detail'),

    # Fee structure endpoints
    path('settings/fee-structures/', fee_structure_list, name='fee-structure-list'),
    path('settings/fee-structures/sync-from-billing/', fee_structure_sync, name='fee-structure-sync'),
    path('settings/fee-structures/admin/purge-and-rebuild/', fee_structure_purge_rebuild,
         name='fee-structure-purge-rebuild'),
    path('settings/fee-structures/<str:class_name>/', fee_structure_for_class, name='fee-structure-for-class'),

    # Payment endpoints
    path('payments/process/', payment_process, name='payment-process'),
    path('payments/admin/clear-payments/', payment_clear_all, name='payment-clear-all'),
    path('payments/student/<str:student_id>/', payment_student_list, name='payment-student-list'),
    path('payments/student/<str:student_id>/summary/', payment_summary, name='payment-student-summary'),
    path('payments/summary/<str:student_id>/', payment_summary, name='payment-summary'),

    # Financial record endpoints
    path('financial-records/', financial_record_list_create, name='financial-record-list-create'),
    path('financial-records/student/<str:student_id>/', financial_record_student, name='financial-record-student'),
    path('financial-records/summary/<str:student_id>/', financial_record_summary, name='financial-record-summary'),
    path('financial-records/<int:pk>/', financial_record_detail, name='financial-record-detail'),

    # Currency endpoints
    path('currency/currencies/', currency_list, name='currency-list'),
    path('currency/exchange-rates/', exchange_rate_list_create, name='exchange-rate-list-create'),
    path('currency/convert/', currency_convert, name='currency-convert'),
]
