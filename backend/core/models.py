from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Extended user model with school role and account lock state"""
    ROLE_CHOICES = [
        ('ADMIN', 'Administrator'),
        ('SUPERUSER', 'Super User'),
        ('USER', 'Teacher'),
        ('TEACHER', 'Teacher'),
        ('SUPER_TEACHER', 'Super Teacher'),
        ('PARENT', 'Parent'),
        ('NURSE', 'School Nurse'),
        ('SPONSOR', 'Sponsor'),
        ('SPONSORSHIP_COORDINATOR', 'Sponsorship Coordinator'),
        ('SPONSORSHIPS_OVERSEER', 'Sponsorships Overseer'),
        ('SECRETARY', 'Secretary'),
        ('ACCOUNTANT', 'Accountant'),
        ('CFO', 'Chief Financial Officer'),
        ('OPM', 'Operations Manager'),
        ('HR', 'Human Resources'),
    ]
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
    ]

    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    role = models.CharField(max_length=40, choices=ROLE_CHOICES, default='USER')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')

    # Login lockout
    password_attempts = models.PositiveIntegerField(default=0)
    last_password_attempt = models.DateTimeField(null=True, blank=True)
    locked_until = models.DateTimeField(null=True, blank=True)
    account_locked = models.BooleanField(default=False)
    lock_reason = models.CharField(max_length=255, blank=True, null=True)

    # Password reset
    first_time_login = models.BooleanField(default=False)
    reset_token = models.CharField(max_length=128, blank=True, null=True)
    reset_token_expiry = models.DateTimeField(null=True, blank=True)

    # Parents: ids of the students they can see
    student_ids = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['role'], name='idx_users_role'),
        ]

    def __str__(self):
        return self.name or self.email or self.username

    @property
    def is_temporarily_locked(self):
        return bool(self.locked_until and self.locked_until > timezone.now())

    def clear_lock(self):
        """Reset every lock field (does not save)"""
        self.password_attempts = 0
        self.last_password_attempt = None
        self.account_locked = False
        self.locked_until = None
        self.lock_reason = None


class UserPrivilege(models.Model):
    """Privilege explicitly granted to a user on top of role defaults"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='privileges')
    privilege = models.CharField(max_length=100)
    assigned_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.user_id}:{self.privilege}"

    @property
    def is_expired(self):
        return bool(self.expires_at and self.expires_at <= timezone.now())

    class Meta:
        db_table = 'user_privileges'
        unique_together = [['user', 'privilege']]
        ordering = ['privilege']


class Notification(models.Model):
    """In-app notification addressed to one user"""
    TYPE_CHOICES = [
        ('INFO', 'Info'),
        ('WARNING', 'Warning'),
        ('PASSWORD_RESET', 'Password Reset'),
        ('WEEKLY_REPORT', 'Weekly Report'),
        ('SPONSORSHIP', 'Sponsorship'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=30, choices=TYPE_CHOICES, default='INFO')
    read = models.BooleanField(default=False)
    date = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.title

    class Meta:
        db_table = 'notifications'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['user', 'read'], name='idx_notifications_user_read'),
        ]


class SchoolSettings(models.Model):
    """School-wide settings, stored as a single row with pk=1"""
    SINGLETON_ID = 1

    school_name = models.CharField(max_length=255, blank=True, default='')
    school_address = models.CharField(max_length=255, blank=True, default='')
    school_phone = models.CharField(max_length=50, blank=True, default='')
    school_email = models.CharField(max_length=255, blank=True, default='')
    school_motto = models.CharField(max_length=255, blank=True, default='')
    motto_size = models.PositiveIntegerField(default=12)
    motto_color = models.CharField(max_length=20, default='#475569')
    school_badge = models.TextField(blank=True, default='')
    school_name_size = models.PositiveIntegerField(default=18)
    school_name_color = models.CharField(max_length=20, default='#0f172a')
    school_website = models.CharField(max_length=255, blank=True, default='')
    school_po_box = models.CharField(max_length=100, blank=True, default='')
    school_district = models.CharField(max_length=100, blank=True, default='')
    school_region = models.CharField(max_length=100, blank=True, default='')
    school_country = models.CharField(max_length=100, blank=True, default='')
    school_founded = models.CharField(max_length=20, blank=True, default='')
    school_registration_number = models.CharField(max_length=100, blank=True, default='')
    school_license_number = models.CharField(max_length=100, blank=True, default='')
    school_tax_number = models.CharField(max_length=100, blank=True, default='')

    # Academic calendar
    current_year = models.CharField(max_length=10, blank=True, default='')
    current_term = models.CharField(max_length=20, default='Term 1')
    next_term_begins = models.CharField(max_length=50, blank=True, default='')
    term_start = models.CharField(max_length=50, blank=True, default='')
    term_end = models.CharField(max_length=50, blank=True, default='')
    reporting_date = models.CharField(max_length=50, blank=True, default='')
    attendance_start = models.CharField(max_length=20, blank=True, default='')
    attendance_end = models.CharField(max_length=20, blank=True, default='')
    public_holidays = models.TextField(blank=True, default='')

    # Document styling
    doc_primary_color = models.CharField(max_length=20, blank=True, default='')
    doc_font_family = models.CharField(max_length=100, blank=True, default='')
    doc_font_size = models.PositiveIntegerField(null=True, blank=True)
    hr_name = models.CharField(max_length=255, blank=True, default='')
    hr_signature_image = models.TextField(blank=True, default='')

    bank_details_html = models.TextField(blank=True, default='')
    rules_regulations_html = models.TextField(blank=True, default='')
    security_settings = models.JSONField(default=dict, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.school_name or 'School settings'

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_ID
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        """Return the settings row, or an unsaved instance with defaults"""
        instance = cls.objects.filter(pk=cls.SINGLETON_ID).first()
        if instance is None:
            instance = cls(pk=cls.SINGLETON_ID, current_year=str(timezone.now().year))
        return instance

    class Meta:
        db_table = 'school_settings'
        verbose_name = 'School settings'
        verbose_name_plural = 'School settings'


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('view', 'View'),
        ('login', 'Login'),
        ('login_failed', 'Login Failed'),
        ('account_lock', 'Account Locked'),
        ('account_unlock', 'Account Unlocked'),
        ('password_reset', 'Password Reset'),
        ('privilege_change', 'Privilege Change'),
        ('student_admit', 'Student Admitted'),
        ('student_flag', 'Student Flagged'),
        ('student_delete', 'Student Deleted'),
        ('duplicate_blocked', 'Duplicate Admission Blocked'),
        ('payment_add', 'Payment Added'),
        ('staff_payment', 'Staff Payment'),
        ('sponsorship_status', 'Sponsorship Status Change'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., student name, receipt number)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., access number, admission ID)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_audit_created'),
            models.Index(fields=['action'], name='idx_audit_action'),
            models.Index(fields=['model_name'], name='idx_audit_model'),
            models.Index(fields=['object_reference'], name='idx_audit_reference'),
        ]
