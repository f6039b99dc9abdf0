# Generated manually for the school management schema

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('name', models.CharField(blank=True, max_length=255)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('role', models.CharField(choices=[('ADMIN', 'Administrator'), ('SUPERUSER', 'Super User'), ('USER', 'Teacher'), ('TEACHER', 'Teacher'), ('SUPER_TEACHER', 'Super Teacher'), ('PARENT', 'Parent'), ('NURSE', 'School Nurse'), ('SPONSOR', 'Sponsor'), ('SPONSORSHIP_COORDINATOR', 'Sponsorship Coordinator'), ('SPONSORSHIPS_OVERSEER', 'Sponsorships Overseer'), ('SECRETARY', 'Secretary'), ('ACCOUNTANT', 'Accountant'), ('CFO', 'Chief Financial Officer'), ('OPM', 'Operations Manager'), ('HR', 'Human Resources')], default='USER', max_length=40)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20)),
                ('password_attempts', models.PositiveIntegerField(default=0)),
                ('last_password_attempt', models.DateTimeField(blank=True, null=True)),
                ('locked_until', models.DateTimeField(blank=True, null=True)),
                ('account_locked', models.BooleanField(default=False)),
                ('lock_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('first_time_login', models.BooleanField(default=False)),
                ('reset_token', models.CharField(blank=True, max_length=128, null=True)),
                ('reset_token_expiry', models.DateTimeField(blank=True, null=True)),
                ('student_ids', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
                'indexes': [models.Index(fields=['role'], name='idx_users_role')],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='SchoolSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('school_name', models.CharField(blank=True, default='', max_length=255)),
                ('school_address', models.CharField(blank=True, default='', max_length=255)),
                ('school_phone', models.CharField(blank=True, default='', max_length=50)),
                ('school_email', models.CharField(blank=True, default='', max_length=255)),
                ('school_motto', models.CharField(blank=True, default='', max_length=255)),
                ('motto_size', models.PositiveIntegerField(default=12)),
                ('motto_color', models.CharField(default='#475569', max_length=20)),
                ('school_badge', models.TextField(blank=True, default='')),
                ('school_name_size', models.PositiveIntegerField(default=18)),
                ('school_name_color', models.CharField(default='#0f172a', max_length=20)),
                ('school_website', models.CharField(blank=True, default='', max_length=255)),
                ('school_po_box', models.CharField(blank=True, default='', max_length=100)),
                ('school_district', models.CharField(blank=True, default='', max_length=100)),
                ('school_region', models.CharField(blank=True, default='', max_length=100)),
                ('school_country', models.CharField(blank=True, default='', max_length=100)),
                ('school_founded', models.CharField(blank=True, default='', max_length=20)),
                ('school_registration_number', models.CharField(blank=True, default='', max_length=100)),
                ('school_license_number', models.CharField(blank=True, default='', max_length=100)),
                ('school_tax_number', models.CharField(blank=True, default='', max_length=100)),
                ('current_year', models.CharField(blank=True, default='', max_length=10)),
                ('current_term', models.CharField(default='Term 1', max_length=20)),
                ('next_term_begins', models.CharField(blank=True, default='', max_length=50)),
                ('term_start', models.CharField(blank=True, default='', max_length=50)),
                ('term_end', models.CharField(blank=True, default='', max_length=50)),
                ('reporting_date', models.CharField(blank=True, default='', max_length=50)),
                ('attendance_start', models.CharField(blank=True, default='', max_length=20)),
                ('attendance_end', models.CharField(blank=True, default='', max_length=20)),
                ('public_holidays', models.TextField(blank=True, default='')),
                ('doc_primary_color', models.CharField(blank=True, default='', max_length=20)),
                ('doc_font_family', models.CharField(blank=True, default='', max_length=100)),
                ('doc_font_size', models.PositiveIntegerField(blank=True, null=True)),
                ('hr_name', models.CharField(blank=True, default='', max_length=255)),
                ('hr_signature_image', models.TextField(blank=True, default='')),
                ('bank_details_html', models.TextField(blank=True, default='')),
                ('rules_regulations_html', models.TextField(blank=True, default='')),
                ('security_settings', models.JSONField(blank=True, default=dict)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'School settings',
                'verbose_name_plural': 'School settings',
                'db_table': 'school_settings',
            },
        ),
        migrations.CreateModel(
            name='UserPrivilege',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('privilege', models.CharField(max_length=100)),
                ('assigned_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='privileges', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'user_privileges',
                'ordering': ['privilege'],
                'unique_together': {('user', 'privilege')},
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('message', models.TextField()),
                ('type', models.CharField(choices=[('INFO', 'Info'), ('WARNING', 'Warning'), ('PASSWORD_RESET', 'Password Reset'), ('WEEKLY_REPORT', 'Weekly Report'), ('SPONSORSHIP', 'Sponsorship')], default='INFO', max_length=30)),
                ('read', models.BooleanField(default=False)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'notifications',
                'ordering': ['-date'],
                'indexes': [models.Index(fields=['user', 'read'], name='idx_notifications_user_read')],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('create', 'Create'), ('update', 'Update'), ('delete', 'Delete'), ('view', 'View'), ('login', 'Login'), ('login_failed', 'Login Failed'), ('account_lock', 'Account Locked'), ('account_unlock', 'Account Unlocked'), ('password_reset', 'Password Reset'), ('privilege_change', 'Privilege Change'), ('student_admit', 'Student Admitted'), ('student_flag', 'Student Flagged'), ('student_delete', 'Student Deleted'), ('duplicate_blocked', 'Duplicate Admission Blocked'), ('payment_add', 'Payment Added'), ('staff_payment', 'Staff Payment'), ('sponsorship_status', 'Sponsorship Status Change')], max_length=50)),
                ('model_name', models.CharField(max_length=100)),
                ('object_id', models.CharField(max_length=100)),
                ('object_name', models.CharField(blank=True, help_text='Human-readable name of the object (e.g., student name, receipt number)', max_length=255, null=True)),
                ('object_reference', models.CharField(blank=True, help_text='Reference identifier (e.g., access number, admission ID)', max_length=255, null=True)),
                ('changes', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['-created_at'], name='idx_audit_created'),
                    models.Index(fields=['action'], name='idx_audit_action'),
                    models.Index(fields=['model_name'], name='idx_audit_model'),
                    models.Index(fields=['object_reference'], name='idx_audit_reference'),
                ],
            },
        ),
    ]
