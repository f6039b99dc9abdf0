from django.db import models


class Staff(models.Model):
    """School staff member managed by HR (no login account)"""
    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=30, blank=True, null=True)
    email = models.CharField(max_length=255, blank=True, null=True)
    role = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    date_of_birth = models.CharField(max_length=20, blank=True, null=True)
    village = models.CharField(max_length=255, blank=True, null=True)
    next_of_kin = models.CharField(max_length=255, blank=True, null=True)
    next_of_kin_phone = models.CharField(max_length=30, blank=True, null=True)
    national_id = models.CharField(max_length=50, blank=True, null=True)
    medical_issues = models.TextField(blank=True, null=True)

    # Contract
    contract_duration_months = models.PositiveIntegerField(blank=True, null=True)
    amount_to_pay = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    hr_notes = models.TextField(blank=True, null=True)

    # Payout details
    bank_account_name = models.CharField(max_length=255, blank=True, null=True)
    bank_account_number = models.CharField(max_length=100, blank=True, null=True)
    bank_name = models.CharField(max_length=255, blank=True, null=True)
    bank_branch = models.CharField(max_length=255, blank=True, null=True)
    mobile_money_number = models.CharField(max_length=30, blank=True, null=True)
    mobile_money_provider = models.CharField(max_length=50, blank=True, null=True)

    # Documents
    cv_file = models.FileField(upload_to='staff/cv', blank=True, null=True)
    cv_file_type = models.CharField(max_length=100, blank=True, null=True)
    passport_photo = models.FileField(upload_to='staff/passport', blank=True, null=True)
    passport_photo_type = models.CharField(max_length=100, blank=True, null=True)
    attachments = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.role or 'staff'})"

    @property
    def payment_key(self):
        """FinancialRecord.student_id used for this staff member's payouts"""
        return f"staff:{self.pk}"

    class Meta:
        db_table = 'staff'
        ordering = ['-created_at']
