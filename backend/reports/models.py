from django.db import models
from django.utils import timezone


class WeeklyReport(models.Model):
    """A staff member's weekly report, reviewed by administrators"""
    STATUS_CHOICES = [
        ('draft', 'Draft'),
        ('submitted', 'Submitted'),
        ('reviewed', 'Reviewed'),
        ('approved', 'Approved'),
    ]

    user_id = models.CharField(max_length=50, db_index=True)
    user_name = models.CharField(max_length=255)
    user_role = models.CharField(max_length=40, default='user')
    week_start = models.DateField(null=True, blank=True)
    week_end = models.DateField(null=True, blank=True)
    report_type = models.CharField(max_length=50, default='user')
    content = models.TextField()
    achievements = models.JSONField(null=True, blank=True)
    challenges = models.JSONField(null=True, blank=True)
    next_week_goals = models.JSONField(null=True, blank=True)
    attachments = models.JSONField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='submitted')
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user_name} - {self.week_start or self.submitted_at.date()}"

    class Meta:
        db_table = 'weekly_reports'
        ordering = ['-submitted_at']
