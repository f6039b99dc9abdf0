# Generated manually for the school management schema

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Attendance',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_id', models.CharField(db_index=True, max_length=50)),
                ('date', models.DateField(db_index=True)),
                ('time', models.CharField(blank=True, default='', max_length=20)),
                ('status', models.CharField(choices=[('present', 'Present'), ('absent', 'Absent'), ('late', 'Late'), ('excused', 'Excused'), ('not_marked', 'Not Marked')], max_length=20)),
                ('teacher_id', models.CharField(max_length=50)),
                ('teacher_name', models.CharField(max_length=255)),
                ('remarks', models.TextField(blank=True, null=True)),
                ('notification_sent', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'attendance',
                'ordering': ['-date', 'time'],
                'unique_together': {('student_id', 'date')},
            },
        ),
    ]
