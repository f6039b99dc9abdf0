from django.conf import settings
from django.db import models
from django.utils import timezone


class Message(models.Model):
    """Internal message between two users; receiver is empty for broadcasts"""
    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('normal', 'Normal'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]

    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sent_messages')
    receiver = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True,
                                 related_name='received_messages')
    title = models.CharField(max_length=255)
    content = models.TextField()
    type = models.CharField(max_length=30, default='GENERAL')
    read = models.BooleanField(default=False)
    priority = models.CharField(max_length=20, choices=PRIORITY_CHOICES, default='normal')
    is_pinned = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self):
        return f"{self.title} ({self.sender_id} -> {self.receiver_id or 'all'})"

    class Meta:
        db_table = 'messages'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['receiver', 'read'], name='idx_messages_receiver_read'),
        ]
