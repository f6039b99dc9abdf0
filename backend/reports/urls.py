from django.urls import path
from . import views

urlpatterns = [
    path('reports/weekly/', views.weekly_report_list_create, name='weekly-report-list-create'),
    path('reports/weekly/admin/', views.weekly_report_admin, name='weekly-report-admin'),
    path('reports/weekly/stats/', views.weekly_report_stats, name='weekly-report-stats'),
    path('reports/weekly/user/<str:user_id>/', views.weekly_report_user, name='weekly-report-user'),
    path('reports/weekly/week/<str:week_start>/', views.weekly_report_week, name='weekly-report-week'),
    path('reports/weekly/<int:pk>/', views.weekly_report_detail, name='weekly-report-detail'),
    path('reports/dashboard/', views.dashboard_stats, name='dashboard-stats'),
]
