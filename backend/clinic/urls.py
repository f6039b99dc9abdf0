from django.urls import path
from .views import clinic_record_list_create, clinic_record_date_range, clinic_record_detail

urlpatterns = [
    # Clinic endpoints
    path('clinic/', clinic_record_list_create, name='clinic-record-list-create'),
    path('clinic/date-range/', clinic_record_date_range, name='clinic-record-date-range'),
    path('clinic/<int:pk>/', clinic_record_detail, name='clinic-record-detail'),
]
