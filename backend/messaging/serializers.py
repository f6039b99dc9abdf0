from rest_framework import serializers
from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    sender_name = serializers.SerializerMethodField()
    sender_role = serializers.CharField(source='sender.role', read_only=True)
    receiver_name = serializers.SerializerMethodField()
    receiver_role = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            'id', 'sender', 'sender_name', 'sender_role', 'receiver', 'receiver_name', 'receiver_role',
            'title', 'content', 'type', 'read', 'priority', 'is_pinned', 'created_at'
        ]
        read_only_fields = ['id', 'created_at']

    def get_sender_name(self, obj):
        return obj.sender.name or obj.sender.username

    def get_receiver_name(self, obj):
        if not obj.receiver:
            return None
        return obj.receiver.name or obj.receiver.username

    def get_receiver_role(self, obj):
        return obj.receiver.role if obj.receiver else None


def conversation_item(message):
    """Compact shape used by the per-user inbox"""
    return {
        'id': message.id,
        'from': message.sender_id,
        'to': message.receiver_id,
        'fromRole': message.sender.role,
        'toRole': message.receiver.role if message.receiver else None,
        'subject': message.title,
        'content': message.content,
        'type': message.type,
        'priority': message.priority,
        'isPinned': message.is_pinned,
        'date': message.created_at,
        'read': message.read,
    }
