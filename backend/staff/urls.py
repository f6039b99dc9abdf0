from django.urls import path
from .views import (
    staff_list_create, staff_detail, staff_cv_download, staff_passport,
    staff_pay, staff_payment_list, staff_payment_summary
)

urlpatterns = [
    # Staff endpoints
    path('staff/', staff_list_create, name='staff-list-create'),
    path('staff/payments/list/', staff_payment_list, name='staff-payment-list'),
    path('staff/<int:pk>/', staff_detail, name='staff-detail'),
    path('staff/<int:pk>/cv-download/', staff_cv_download, name='staff-cv-download'),
    path('staff/<int:pk>/passport/', staff_passport, name='staff-passport'),
    path('staff/<int:pk>/pay/', staff_pay, name='staff-pay'),
    path('staff/<int:pk>/payments/summary/', staff_payment_summary, name='staff-payment-summary'),
]
