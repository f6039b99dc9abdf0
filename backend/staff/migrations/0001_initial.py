# Generated manually for the school management schema

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Staff',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('phone', models.CharField(blank=True, max_length=30, null=True)),
                ('email', models.CharField(blank=True, max_length=255, null=True)),
                ('role', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('date_of_birth', models.CharField(blank=True, max_length=20, null=True)),
                ('village', models.CharField(blank=True, max_length=255, null=True)),
                ('next_of_kin', models.CharField(blank=True, max_length=255, null=True)),
                ('next_of_kin_phone', models.CharField(blank=True, max_length=30, null=True)),
                ('national_id', models.CharField(blank=True, max_length=50, null=True)),
                ('medical_issues', models.TextField(blank=True, null=True)),
                ('contract_duration_months', models.PositiveIntegerField(blank=True, null=True)),
                ('amount_to_pay', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('hr_notes', models.TextField(blank=True, null=True)),
                ('bank_account_name', models.CharField(blank=True, max_length=255, null=True)),
                ('bank_account_number', models.CharField(blank=True, max_length=100, null=True)),
                ('bank_name', models.CharField(blank=True, max_length=255, null=True)),
                ('bank_branch', models.CharField(blank=True, max_length=255, null=True)),
                ('mobile_money_number', models.CharField(blank=True, max_length=30, null=True)),
                ('mobile_money_provider', models.CharField(blank=True, max_length=50, null=True)),
                ('cv_file', models.FileField(blank=True, null=True, upload_to='staff/cv')),
                ('cv_file_type', models.CharField(blank=True, max_length=100, null=True)),
                ('passport_photo', models.FileField(blank=True, null=True, upload_to='staff/passport')),
                ('passport_photo_type', models.CharField(blank=True, max_length=100, null=True)),
                ('attachments', models.JSONField(blank=True, default=list)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'staff',
                'ordering': ['-created_at'],
            },
        ),
    ]
