"""
URL configuration for the school management backend.

Every app mounts its routes under ``api/v1/``.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "School Management Admin Panel"
admin.site.site_title = "School Management Admin Portal"
admin.site.index_title = "Welcome to the School Administration Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('backend.core.urls')),
    path('api/v1/', include('backend.students.urls')),
    path('api/v1/', include('backend.billing.urls')),
    path('api/v1/', include('backend.staff.urls')),
    path('api/v1/', include('backend.clinic.urls')),
    path('api/v1/', include('backend.attendance.urls')),
    path('api/v1/', include('backend.messaging.urls')),
    path('api/v1/', include('backend.sponsorships.urls')),
    path('api/v1/', include('backend.resources.urls')),
    path('api/v1/', include('backend.inventory.urls')),
    path('api/v1/', include('backend.reports.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
