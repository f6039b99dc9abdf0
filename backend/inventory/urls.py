from django.urls import path
from .views import inventory_list_create, inventory_detail, inventory_adjustment_list_create

urlpatterns = [
    path('inventory/', inventory_list_create, name='inventory-list-create'),
    path('inventory/<int:pk>/', inventory_detail, name='inventory-detail'),
    path('inventory/<int:pk>/adjustments/', inventory_adjustment_list_create, name='inventory-adjustment-list-create'),
]
