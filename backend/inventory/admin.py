from django.contrib import admin
from .models import InventoryItem, InventoryAdjustment


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'quantity', 'unit', 'location', 'status', 'updated_at']
    list_filter = ['status', 'category']
    search_fields = ['name', 'category', 'location']
    ordering = ['name']


@admin.register(InventoryAdjustment)
class InventoryAdjustmentAdmin(admin.ModelAdmin):
    list_display = ['item', 'adjustment_type', 'quantity', 'reason', 'created_by', 'created_at']
    list_filter = ['adjustment_type', 'created_at']
    search_fields = ['item__name', 'reason']
    ordering = ['-created_at']
