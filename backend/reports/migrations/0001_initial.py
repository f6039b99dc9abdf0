# Generated manually for the school management schema

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='WeeklyReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.CharField(db_index=True, max_length=50)),
                ('user_name', models.CharField(max_length=255)),
                ('user_role', models.CharField(default='user', max_length=40)),
                ('week_start', models.DateField(blank=True, null=True)),
                ('week_end', models.DateField(blank=True, null=True)),
                ('report_type', models.CharField(default='user', max_length=50)),
                ('content', models.TextField()),
                ('achievements', models.JSONField(blank=True, null=True)),
                ('challenges', models.JSONField(blank=True, null=True)),
                ('next_week_goals', models.JSONField(blank=True, null=True)),
                ('attachments', models.JSONField(blank=True, null=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('submitted', 'Submitted'), ('reviewed', 'Reviewed'), ('approved', 'Approved')], default='submitted', max_length=20)),
                ('submitted_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'weekly_reports',
                'ordering': ['-submitted_at'],
            },
        ),
    ]
