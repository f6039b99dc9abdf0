# Generated manually for the school management schema

from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='ClinicRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_id', models.CharField(db_index=True, max_length=50)),
                ('access_number', models.CharField(blank=True, default='', max_length=100)),
                ('student_name', models.CharField(max_length=255)),
                ('class_name', models.CharField(blank=True, default='', max_length=50)),
                ('stream_name', models.CharField(blank=True, default='', max_length=50)),
                ('visit_date', models.DateTimeField(db_index=True)),
                ('visit_time', models.CharField(blank=True, default='', max_length=20)),
                ('symptoms', models.TextField(blank=True, default='')),
                ('diagnosis', models.TextField(blank=True, default='')),
                ('treatment', models.TextField(blank=True, default='')),
                ('medication', models.TextField(blank=True, default='')),
                ('cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('nurse_id', models.CharField(max_length=50)),
                ('nurse_name', models.CharField(max_length=255)),
                ('follow_up_required', models.BooleanField(default=False)),
                ('follow_up_date', models.DateTimeField(blank=True, null=True)),
                ('parent_notified', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('resolved', 'Resolved'), ('ongoing', 'Ongoing'), ('referred', 'Referred'), ('follow_up', 'Follow Up')], default='resolved', max_length=20)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'clinic_records',
                'ordering': ['-visit_date'],
            },
        ),
    ]
