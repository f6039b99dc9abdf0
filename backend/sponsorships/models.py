from decimal import Decimal

from django.db import models
from django.utils import timezone


class Sponsorship(models.Model):
    """A sponsor's pledge for one student, moving through the review pipeline"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('coordinator-approved', 'Coordinator Approved'),
        ('rejected', 'Rejected'),
        ('sponsored', 'Sponsored'),
        ('completed', 'Completed'),
    ]

    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='sponsorships')
    sponsor_id = models.CharField(max_length=50, blank=True, null=True)
    sponsor_name = models.CharField(max_length=255)
    sponsor_country = models.CharField(max_length=100, default='Uganda')
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    type = models.CharField(max_length=50, default='individual')
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='pending', db_index=True)
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField(null=True, blank=True)
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sponsor_name} -> {self.student_id} ({self.status})"

    class Meta:
        db_table = 'sponsorships'
        ordering = ['-created_at']
