from django.urls import path
from .views import (
    attendance_list_create, attendance_by_student, attendance_by_date,
    attendance_detail, attendance_ensure_daily
)

urlpatterns = [
    # Attendance endpoints
    path('attendance/', attendance_list_create, name='attendance-list-create'),
    path('attendance/ensure-daily/', attendance_ensure_daily, name='attendance-ensure-daily'),
    path('attendance/student/<str:student_id>/', attendance_by_student, name='attendance-by-student'),
    path('attendance/date/<str:date>/', attendance_by_date, name='attendance-by-date'),
    path('attendance/<int:pk>/', attendance_detail, name='attendance-detail'),
]
