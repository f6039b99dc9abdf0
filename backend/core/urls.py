from django.urls import path
from .views import (
    CustomTokenRefreshView, register, login, user_me,
    provide_temp_password, change_password, verify_reset_token, reset_password, forgot_password,
    user_list_create, user_detail, user_reset_password, user_lock, user_unlock, generate_reset_link,
    user_privileges, user_privilege_remove, user_reset_privileges, assign_default_privileges_all,
    assign_students, assigned_students, unassign_student,
    notification_list, notification_unread_count, notification_mark_read, password_reset_request,
    school_settings, academic_settings, security_settings,
    audit_log_list, audit_log_detail,
    global_search
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', login, name='login'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/provide-temp-password/', provide_temp_password, name='provide-temp-password'),
    path('auth/change-password/', change_password, name='change-password'),
    path('auth/verify-reset-token/', verify_reset_token, name='verify-reset-token'),
    path('auth/reset-password/', reset_password, name='reset-password'),
    path('auth/forgot-password/', forgot_password, name='forgot-password'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/assign-default-privileges/', assign_default_privileges_all, name='user-assign-default-privileges'),
    path('users/<int:pk>/', user_detail, name='user-detail'),
    path('users/<int:pk>/reset-password/', user_reset_password, name='user-reset-password'),
    path('users/<int:pk>/lock/', user_lock, name='user-lock'),
    path('users/<int:pk>/unlock/', user_unlock, name='user-unlock'),
    path('users/<int:pk>/generate-reset-link/', generate_reset_link, name='user-generate-reset-link'),
    path('users/<int:pk>/privileges/', user_privileges, name='user-privileges'),
    path('users/<int:pk>/privileges/<str:privilege>/', user_privilege_remove, name='user-privilege-remove'),
    path('users/<int:pk>/reset-privileges/', user_reset_privileges, name='user-reset-privileges'),
    path('users/<int:pk>/assign-students/', assign_students, name='user-assign-students'),
    path('users/<int:pk>/assigned-students/', assigned_students, name='user-assigned-students'),
    path('users/<int:pk>/assigned-students/<int:student_id>/', unassign_student, name='user-unassign-student'),

    # Notification endpoints
    path('notifications/password-reset-request/', password_reset_request, name='notification-password-reset-request'),
    path('notifications/<int:user_id>/', notification_list, name='notification-list'),
    path('notifications/<int:user_id>/unread-count/', notification_unread_count, name='notification-unread-count'),
    path('notifications/<int:pk>/read/', notification_mark_read, name='notification-mark-read'),

    # Settings endpoints
    path('settings/', school_settings, name='school-settings'),
    path('settings/academic/', academic_settings, name='academic-settings'),
    path('settings/security/', security_settings, name='security-settings'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),

    # Global search endpoint
    path('search/', global_search, name='global-search'),
]
