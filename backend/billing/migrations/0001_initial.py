# Generated manually for the school management schema

from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='BillingType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('frequency', models.CharField(blank=True, default='', max_length=50)),
                ('term', models.CharField(blank=True, default='', max_length=20)),
                ('year', models.CharField(blank=True, default='', max_length=10)),
                ('class_name', models.CharField(db_index=True, max_length=50)),
                ('description', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'billing_types',
                'ordering': ['class_name', 'name'],
                'indexes': [models.Index(fields=['class_name', 'term', 'year'], name='idx_billing_class_term')],
            },
        ),
        migrations.CreateModel(
            name='FeeStructure',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('class_name', models.CharField(db_index=True, max_length=50)),
                ('fee_name', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('frequency', models.CharField(blank=True, default='', max_length=50)),
                ('term', models.CharField(blank=True, default='', max_length=20)),
                ('year', models.CharField(blank=True, default='', max_length=10)),
                ('description', models.TextField(blank=True, default='')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'fee_structures',
                'ordering': ['class_name', 'fee_name'],
            },
        ),
        migrations.CreateModel(
            name='FinancialRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_id', models.CharField(db_index=True, max_length=50)),
                ('type', models.CharField(choices=[('fee', 'Fee'), ('payment', 'Payment'), ('sponsorship', 'Sponsorship'), ('staff_payment', 'Staff Payment')], max_length=20)),
                ('billing_type', models.CharField(blank=True, default='', max_length=255)),
                ('billing_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('description', models.TextField(blank=True, default='')),
                ('date', models.DateTimeField()),
                ('payment_date', models.DateTimeField(blank=True, null=True)),
                ('payment_time', models.CharField(blank=True, default='', max_length=20)),
                ('payment_method', models.CharField(blank=True, default='', max_length=50)),
                ('status', models.CharField(choices=[('paid', 'Paid'), ('pending', 'Pending'), ('overdue', 'Overdue')], default='pending', max_length=20)),
                ('receipt_number', models.CharField(blank=True, db_index=True, default='', max_length=50)),
                ('balance', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('term', models.CharField(blank=True, default='', max_length=20)),
                ('year', models.CharField(blank=True, default='', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'financial_records',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['student_id', 'type', 'status'], name='idx_financial_student_type'),
                    models.Index(fields=['term', 'year'], name='idx_financial_term_year'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ExchangeRate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_currency', models.CharField(max_length=3)),
                ('to_currency', models.CharField(max_length=3)),
                ('rate', models.DecimalField(decimal_places=6, max_digits=18)),
                ('effective_date', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'currency_exchange_rates',
                'ordering': ['-effective_date'],
            },
        ),
    ]
