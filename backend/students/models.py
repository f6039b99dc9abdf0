from django.db import models
from decimal import Decimal

OVERSEER_PREFIX = 'None-'


class Student(models.Model):
    """Admitted student (or overseer-admitted pupil awaiting school admission)"""
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('pending', 'Pending'),
        ('sponsored', 'Sponsored'),
        ('awaiting', 'Awaiting'),
        ('left', 'Left'),
        ('expelled', 'Expelled'),
        ('graduated', 'Graduated'),
        ('re-admitted', 'Re-admitted'),
        ('dropped', 'Dropped'),
    ]
    RESIDENCE_CHOICES = [
        ('Day', 'Day'),
        ('Boarding', 'Boarding'),
    ]
    ADMITTED_BY_CHOICES = [
        ('admin', 'Admin'),
        ('overseer', 'Overseer'),
    ]

    name = models.CharField(max_length=255)
    access_number = models.CharField(max_length=100, blank=True, default='', db_index=True)
    admission_id = models.CharField(max_length=100, blank=True, default='', db_index=True)
    nin = models.CharField(max_length=50, blank=True, default='')
    lin = models.CharField(max_length=50, blank=True, default='')
    date_of_birth = models.CharField(max_length=20, blank=True, default='')
    age = models.PositiveIntegerField(default=0)
    gender = models.CharField(max_length=20, blank=True, default='')
    residence_type = models.CharField(max_length=20, choices=RESIDENCE_CHOICES, null=True, blank=True)
    phone = models.CharField(max_length=30, blank=True, default='')
    phone_country_code = models.CharField(max_length=5, default='UG')
    email = models.CharField(max_length=255, blank=True, default='')

    class_name = models.CharField(max_length=50, db_index=True)
    stream = models.CharField(max_length=50, blank=True, default='')

    # Fees
    total_fees = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    fees_paid = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    individual_fee = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # Sponsorship
    needs_sponsorship = models.BooleanField(default=False)
    sponsorship_status = models.CharField(max_length=50, default='awaiting')
    sponsorship_story = models.TextField(blank=True, default='')
    class_completion = models.CharField(max_length=100, blank=True, default='')
    career_aspiration = models.CharField(max_length=255, blank=True, default='')

    # Photos: relative paths under MEDIA_ROOT
    photo = models.CharField(max_length=255, blank=True, default='')
    family_photo = models.CharField(max_length=255, blank=True, default='')
    passport_photo = models.CharField(max_length=255, blank=True, default='')

    # Parent
    parent_name = models.CharField(max_length=255, blank=True, default='')
    parent_nin = models.CharField(max_length=50, blank=True, default='')
    parent_nin_type = models.CharField(max_length=20, default='NIN')
    parent_phone = models.CharField(max_length=30, blank=True, default='')
    parent_phone_country_code = models.CharField(max_length=5, default='UG')
    parent_email = models.CharField(max_length=255, blank=True, default='')
    parent_address = models.CharField(max_length=255, blank=True, default='')
    parent_occupation = models.CharField(max_length=255, blank=True, default='')
    parent_story = models.TextField(blank=True, default='')
    parent_age = models.PositiveIntegerField(null=True, blank=True)
    parent_family_size = models.PositiveIntegerField(null=True, blank=True)
    parent_relationship = models.CharField(max_length=50, blank=True, default='')

    # Second parent
    second_parent_name = models.CharField(max_length=255, blank=True, default='')
    second_parent_nin = models.CharField(max_length=50, blank=True, default='')
    second_parent_phone = models.CharField(max_length=30, blank=True, default='')
    second_parent_phone_country_code = models.CharField(max_length=5, default='UG')
    second_parent_email = models.CharField(max_length=255, blank=True, default='')
    second_parent_address = models.CharField(max_length=255, blank=True, default='')
    second_parent_occupation = models.CharField(max_length=255, blank=True, default='')

    # Personal
    address = models.CharField(max_length=255, blank=True, default='')
    village = models.CharField(max_length=255, blank=True, default='')
    hobbies = models.TextField(blank=True, default='')
    dreams = models.TextField(blank=True, default='')
    aspirations = models.TextField(blank=True, default='')
    medical_condition = models.TextField(blank=True, default='')
    medical_problems = models.TextField(blank=True, default='')

    conduct_notes = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='active', db_index=True)
    flag_comment = models.TextField(blank=True, default='')
    admitted_by = models.CharField(max_length=20, choices=ADMITTED_BY_CHOICES, default='admin')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.access_number or 'no access number'})"

    @property
    def fee_balance(self):
        return (self.total_fees or Decimal('0.00')) - (self.fees_paid or Decimal('0.00'))

    @property
    def is_overseer_admission(self):
        return (
            self.admitted_by == 'overseer'
            or (self.access_number or '').startswith(OVERSEER_PREFIX)
            or (self.admission_id or '').startswith(OVERSEER_PREFIX)
        )

    class Meta:
        db_table = 'students'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['class_name', 'stream', 'status'], name='idx_students_class_stream'),
        ]


class DroppedAccessNumber(models.Model):
    """Access number freed by a deleted or flagged student, reusable in its class/stream"""
    access_number = models.CharField(max_length=100, db_index=True)
    class_name = models.CharField(max_length=50)
    stream_name = models.CharField(max_length=50, blank=True, default='')
    dropped_at = models.DateTimeField(auto_now_add=True)
    reason = models.CharField(max_length=255, blank=True, default='')

    def __str__(self):
        return self.access_number

    class Meta:
        db_table = 'dropped_access_numbers'
        ordering = ['dropped_at']
