# Generated manually for the school management schema

from decimal import Decimal
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Sponsorship',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sponsor_id', models.CharField(blank=True, max_length=50, null=True)),
                ('sponsor_name', models.CharField(max_length=255)),
                ('sponsor_country', models.CharField(default='Uganda', max_length=100)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('type', models.CharField(default='individual', max_length=50)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('coordinator-approved', 'Coordinator Approved'), ('rejected', 'Rejected'), ('sponsored', 'Sponsored'), ('completed', 'Completed')], db_index=True, default='pending', max_length=30)),
                ('start_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('end_date', models.DateTimeField(blank=True, null=True)),
                ('description', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sponsorships', to='students.student')),
            ],
            options={
                'db_table': 'sponsorships',
                'ordering': ['-created_at'],
            },
        ),
    ]
