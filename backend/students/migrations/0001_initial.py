# Generated manually for the school management schema

from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('access_number', models.CharField(blank=True, db_index=True, default='', max_length=100)),
                ('admission_id', models.CharField(blank=True, db_index=True, default='', max_length=100)),
                ('nin', models.CharField(blank=True, default='', max_length=50)),
                ('lin', models.CharField(blank=True, default='', max_length=50)),
                ('date_of_birth', models.CharField(blank=True, default='', max_length=20)),
                ('age', models.PositiveIntegerField(default=0)),
                ('gender', models.CharField(blank=True, default='', max_length=20)),
                ('residence_type', models.CharField(blank=True, choices=[('Day', 'Day'), ('Boarding', 'Boarding')], max_length=20, null=True)),
                ('phone', models.CharField(blank=True, default='', max_length=30)),
                ('phone_country_code', models.CharField(default='UG', max_length=5)),
                ('email', models.CharField(blank=True, default='', max_length=255)),
                ('class_name', models.CharField(db_index=True, max_length=50)),
                ('stream', models.CharField(blank=True, default='', max_length=50)),
                ('total_fees', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('fees_paid', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('individual_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('needs_sponsorship', models.BooleanField(default=False)),
                ('sponsorship_status', models.CharField(default='awaiting', max_length=50)),
                ('sponsorship_story', models.TextField(blank=True, default='')),
                ('class_completion', models.CharField(blank=True, default='', max_length=100)),
                ('career_aspiration', models.CharField(blank=True, default='', max_length=255)),
                ('photo', models.CharField(blank=True, default='', max_length=255)),
                ('family_photo', models.CharField(blank=True, default='', max_length=255)),
                ('passport_photo', models.CharField(blank=True, default='', max_length=255)),
                ('parent_name', models.CharField(blank=True, default='', max_length=255)),
                ('parent_nin', models.CharField(blank=True, default='', max_length=50)),
                ('parent_nin_type', models.CharField(default='NIN', max_length=20)),
                ('parent_phone', models.CharField(blank=True, default='', max_length=30)),
                ('parent_phone_country_code', models.CharField(default='UG', max_length=5)),
                ('parent_email', models.CharField(blank=True, default='', max_length=255)),
                ('parent_address', models.CharField(blank=True, default='', max_length=255)),
                ('parent_occupation', models.CharField(blank=True, default='', max_length=255)),
                ('parent_story', models.TextField(blank=True, default='')),
                ('parent_age', models.PositiveIntegerField(blank=True, null=True)),
                ('parent_family_size', models.PositiveIntegerField(blank=True, null=True)),
                ('parent_relationship', models.CharField(blank=True, default='', max_length=50)),
                ('second_parent_name', models.CharField(blank=True, default='', max_length=255)),
                ('second_parent_nin', models.CharField(blank=True, default='', max_length=50)),
                ('second_parent_phone', models.CharField(blank=True, default='', max_length=30)),
                ('second_parent_phone_country_code', models.CharField(default='UG', max_length=5)),
                ('second_parent_email', models.CharField(blank=True, default='', max_length=255)),
                ('second_parent_address', models.CharField(blank=True, default='', max_length=255)),
                ('second_parent_occupation', models.CharField(blank=True, default='', max_length=255)),
                ('address', models.CharField(blank=True, default='', max_length=255)),
                ('village', models.CharField(blank=True, default='', max_length=255)),
                ('hobbies', models.TextField(blank=True, default='')),
                ('dreams', models.TextField(blank=True, default='')),
                ('aspirations', models.TextField(blank=True, default='')),
                ('medical_condition', models.TextField(blank=True, default='')),
                ('medical_problems', models.TextField(blank=True, default='')),
                ('conduct_notes', models.JSONField(blank=True, default=list)),
                ('status', models.CharField(choices=[('active', 'Active'), ('pending', 'Pending'), ('sponsored', 'Sponsored'), ('awaiting', 'Awaiting'), ('left', 'Left'), ('expelled', 'Expelled'), ('graduated', 'Graduated'), ('re-admitted', 'Re-admitted'), ('dropped', 'Dropped')], db_index=True, default='active', max_length=30)),
                ('flag_comment', models.TextField(blank=True, default='')),
                ('admitted_by', models.CharField(choices=[('admin', 'Admin'), ('overseer', 'Overseer')], default='admin', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'students',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['class_name', 'stream', 'status'], name='idx_students_class_stream')],
            },
        ),
        migrations.CreateModel(
            name='DroppedAccessNumber',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('access_number', models.CharField(db_index=True, max_length=100)),
                ('class_name', models.CharField(max_length=50)),
                ('stream_name', models.CharField(blank=True, default='', max_length=50)),
                ('dropped_at', models.DateTimeField(auto_now_add=True)),
                ('reason', models.CharField(blank=True, default='', max_length=255)),
            ],
            options={
                'db_table': 'dropped_access_numbers',
                'ordering': ['dropped_at'],
            },
        ),
    ]
