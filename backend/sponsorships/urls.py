from django.urls import path
from .views import (
    sponsorship_list_create, sponsorship_detail, sponsorship_status_action, student_sponsorship_status
)

urlpatterns = [
    path('sponsorships/', sponsorship_list_create, name='sponsorship-list-create'),
    path('sponsorships/student/<int:student_id>/make-available/', student_sponsorship_status,
         {'sponsorship_status': 'available-for-sponsors'}, name='sponsorship-student-make-available'),
    path('sponsorships/student/<int:student_id>/make-eligible/', student_sponsorship_status,
         {'sponsorship_status': 'eligible'}, name='sponsorship-student-make-eligible'),
    path('sponsorships/<int:pk>/', sponsorship_detail, name='sponsorship-detail'),
    path('sponsorships/<int:pk>/approve/', sponsorship_status_action,
         {'action': 'approve'}, name='sponsorship-approve'),
    path('sponsorships/<int:pk>/reject/', sponsorship_status_action,
         {'action': 'reject'}, name='sponsorship-reject'),
    path('sponsorships/<int:pk>/complete/', sponsorship_status_action,
         {'action': 'complete'}, name='sponsorship-complete'),
    path('sponsorships/<int:pk>/approve-sponsored/', sponsorship_status_action,
         {'action': 'approve-sponsored'}, name='sponsorship-approve-sponsored'),
]
