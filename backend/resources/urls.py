from django.urls import path
from .views import (
    resource_list_create, resource_by_class, resource_detail, resource_download, resource_preview
)

urlpatterns = [
    path('resources/', resource_list_create, name='resource-list-create'),
    path('resources/class/<str:class_id>/', resource_by_class, name='resource-by-class'),
    path('resources/<int:pk>/', resource_detail, name='resource-detail'),
    path('resources/<int:pk>/download/', resource_download, name='resource-download'),
    path('resources/<int:pk>/preview/', resource_preview, name='resource-preview'),
]
