from django.urls import path
from .views import (
    student_list_create, student_enrolled, student_detail, student_flag,
    student_conduct_notes, student_approve_overseer, student_fee_balance,
    dropped_access_number_list, dropped_access_number_by_stream, dropped_access_number_delete,
    class_list, class_detail
)

urlpatterns = [
    # Student endpoints
    path('students/', student_list_create, name='student-list-create'),
    path('students/enrolled/', student_enrolled, name='student-enrolled'),
    path('students/<int:pk>/', student_detail, name='student-detail'),
    path('students/<int:pk>/flag/', student_flag, name='student-flag'),
    path('students/<int:pk>/conduct-notes/', student_conduct_notes, name='student-conduct-notes'),
    path('students/<int:pk>/approve-overseer-admission/', student_approve_overseer, name='student-approve-overseer'),
    path('students/<int:pk>/fee-balance/', student_fee_balance, name='student-fee-balance'),

    # Dropped access number endpoints
    path('students/dropped-access-numbers/', dropped_access_number_list, name='dropped-access-number-list'),
    path('students/dropped-access-numbers/<str:class_name>/<str:stream>/', dropped_access_number_by_stream,
         name='dropped-access-number-by-stream'),
    path('students/dropped-access-numbers/<str:access_number>/', dropped_access_number_delete,
         name='dropped-access-number-delete'),

    # Class endpoints
    path('classes/', class_list, name='class-list'),
    path('classes/<str:class_id>/', class_detail, name='class-detail'),
]
