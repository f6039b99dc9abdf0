from django.db import models
from decimal import Decimal


class ClinicRecord(models.Model):
    """Student visit to the school clinic"""
    STATUS_CHOICES = [
        ('resolved', 'Resolved'),
        ('ongoing', 'Ongoing'),
        ('referred', 'Referred'),
        ('follow_up', 'Follow Up'),
    ]

    student_id = models.CharField(max_length=50, db_index=True)
    access_number = models.CharField(max_length=100, blank=True, default='')
    student_name = models.CharField(max_length=255)
    class_name = models.CharField(max_length=50, blank=True, default='')
    stream_name = models.CharField(max_length=50, blank=True, default='')
    visit_date = models.DateTimeField(db_index=True)
    visit_time = models.CharField(max_length=20, blank=True, default='')
    symptoms = models.TextField(blank=True, default='')
    diagnosis = models.TextField(blank=True, default='')
    treatment = models.TextField(blank=True, default='')
    medication = models.TextField(blank=True, default='')
    cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    nurse_id = models.CharField(max_length=50)
    nurse_name = models.CharField(max_length=255)
    follow_up_required = models.BooleanField(default=False)
    follow_up_date = models.DateTimeField(null=True, blank=True)
    parent_notified = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='resolved')
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.student_name} - {self.visit_date:%Y-%m-%d}"

    class Meta:
        db_table = 'clinic_records'
        ordering = ['-visit_date']
