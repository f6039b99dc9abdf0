from django.contrib import admin
from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['title', 'sender', 'receiver', 'type', 'priority', 'read', 'created_at']
    list_filter = ['type', 'priority', 'read', 'is_pinned']
    search_fields = ['title', 'content', 'sender__name', 'receiver__name']
    readonly_fields = ['created_at']
