from django.db import models
from decimal import Decimal


class BillingType(models.Model):
    """Fee item charged to a class for a term"""
    name = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    frequency = models.CharField(max_length=50, blank=True, default='')
    term = models.CharField(max_length=20, blank=True, default='')
    year = models.CharField(max_length=10, blank=True, default='')
    class_name = models.CharField(max_length=50, db_index=True)
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} - {self.class_name} ({self.term} {self.year})"

    class Meta:
        db_table = 'billing_types'
        ordering = ['class_name', 'name']
        indexes = [
            models.Index(fields=['class_name', 'term', 'year'], name='idx_billing_class_term'),
        ]


class FeeStructure(models.Model):
    """Published fee list for a class, mirrored from billing types"""
    class_name = models.CharField(max_length=50, db_index=True)
    fee_name = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    frequency = models.CharField(max_length=50, blank=True, default='')
    term = models.CharField(max_length=20, blank=True, default='')
    year = models.CharField(max_length=10, blank=True, default='')
    description = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.class_name}: {self.fee_name}"

    class Meta:
        db_table = 'fee_structures'
        ordering = ['class_name', 'fee_name']


class FinancialRecord(models.Model):
    """Fee charge, payment, sponsorship or staff payout"""
    TYPE_CHOICES = [
        ('fee', 'Fee'),
        ('payment', 'Payment'),
        ('sponsorship', 'Sponsorship'),
        ('staff_payment', 'Staff Payment'),
    ]
    STATUS_CHOICES = [
        ('paid', 'Paid'),
        ('pending', 'Pending'),
        ('overdue', 'Overdue'),
    ]

    # Student id, or "staff:<id>" for staff payouts
    student_id = models.CharField(max_length=50, db_index=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    billing_type = models.CharField(max_length=255, blank=True, default='')
    billing_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.TextField(blank=True, default='')
    date = models.DateTimeField()
    payment_date = models.DateTimeField(null=True, blank=True)
    payment_time = models.CharField(max_length=20, blank=True, default='')
    payment_method = models.CharField(max_length=50, blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    receipt_number = models.CharField(max_length=50, blank=True, default='', db_index=True)
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    term = models.CharField(max_length=20, blank=True, default='')
    year = models.CharField(max_length=10, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.type} {self.amount} ({self.receipt_number or self.student_id})"

    class Meta:
        db_table = 'financial_records'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['student_id', 'type', 'status'], name='idx_financial_student_type'),
            models.Index(fields=['term', 'year'], name='idx_financial_term_year'),
        ]


class ExchangeRate(models.Model):
    from_currency = models.CharField(max_length=3)
    to_currency = models.CharField(max_length=3)
    rate = models.DecimalField(max_digits=18, decimal_places=6)
    effective_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.from_currency}->{self.to_currency} @ {self.rate}"

    class Meta:
        db_table = 'currency_exchange_rates'
        ordering = ['-effective_date']
