"""
Role default privileges

Each role gets a default privilege set matching the parts of the school
application it works with. Explicit UserPrivilege rows are added on top.
"""
from django.utils import timezone

# Shared groups
PERSONAL_SETTINGS = ['view_settings', 'edit_settings', 'change_password', 'update_profile', 'view_user_preferences']
BASIC_MESSAGING = ['view_messages', 'send_message', 'reply_message', 'mark_message_read']
FINANCIAL_RECORDS = [
    'view_financial', 'add_financial_record', 'edit_financial_record',
    'delete_financial_record', 'export_financial', 'view_financial_analytics',
]
PAYMENTS = [
    'view_payments', 'process_payment', 'refund_payment', 'export_payments',
    'view_payment_analytics', 'manage_payment_methods',
]
CLINIC = [
    'view_clinic_records', 'add_clinic_record', 'edit_clinic_record', 'delete_clinic_record',
    'export_clinic_records', 'notify_clinic_visits', 'view_clinic_analytics',
]
SPONSORSHIP_MANAGEMENT = [
    'view_sponsorships', 'manage_sponsorships', 'approve_sponsorship', 'assign_sponsorship',
    'reject_sponsorship', 'view_sponsorship_analytics',
]
TEACHER_MARKS = ['add_student_marks', 'edit_student_marks', 'view_student_marks', 'export_student_marks']


def _unique(*groups):
    """Flatten privilege groups, keeping first occurrence order"""
    seen = []
    for group in groups:
        for privilege in group:
            if privilege not in seen:
                seen.append(privilege)
    return seen


ROLE_DEFAULT_PRIVILEGES = {
    'ADMIN': _unique(
        ['view_students', 'add_student', 'edit_student', 'delete_student', 'export_students', 'flag_student',
         'unflag_student', 're_admit_student', 'view_student_details', 'edit_student_conduct', 'clear_students',
         'delete_students_by_class', 'admit_from_overseer'],
        ['view_users', 'add_user', 'edit_user', 'delete_user', 'lock_user', 'unlock_user', 'reset_user_password',
         'generate_temp_password', 'assign_privileges', 'remove_privileges', 'export_users'],
        ['view_teachers', 'add_teacher', 'edit_teacher', 'delete_teacher', 'assign_teacher_classes',
         'view_teacher_analytics'],
        ['assign_parent_students', 'view_parent_analytics'],
        ['view_classes', 'add_class', 'edit_class', 'delete_class', 'manage_class_students', 'view_class_analytics',
         'view_streams', 'add_stream', 'edit_stream', 'delete_stream'],
        ['view_attendance', 'mark_attendance', 'edit_attendance', 'delete_attendance', 'export_attendance',
         'view_attendance_analytics', 'bulk_attendance'],
        FINANCIAL_RECORDS,
        SPONSORSHIP_MANAGEMENT, ['sponsor_student', 'view_sponsor_details'],
        ['view_reports', 'generate_report', 'view_report_cards', 'generate_report_cards', 'export_reports',
         'schedule_reports', 'view_report_analytics'],
        PAYMENTS,
        ['view_messages', 'send_message', 'delete_message', 'reply_message', 'mark_message_read', 'export_messages'],
        ['view_analytics', 'export_analytics', 'view_dashboard_analytics', 'view_user_analytics',
         'view_system_analytics'],
        ['view_timetables', 'add_timetable', 'edit_timetable', 'delete_timetable', 'manage_timetable_conflicts',
         'export_timetable'],
        CLINIC,
        ['view_resources', 'add_resource', 'edit_resource', 'delete_resource', 'upload_resource',
         'download_resource', 'export_resources'],
        ['view_weekly_reports', 'submit_reports', 'approve_weekly_reports', 'review_weekly_reports',
         'export_weekly_reports'],
        ['view_advanced_settings', 'edit_advanced_settings', 'system_backup', 'system_restore',
         'system_maintenance', 'view_system_logs'],
        PERSONAL_SETTINGS, ['export_settings', 'system_configuration', 'view_system_info'],
        ['view_photos', 'add_photo', 'edit_photo', 'delete_photo', 'upload_photo', 'download_photo',
         'organize_photos'],
        TEACHER_MARKS,
        ['admin_panel'],
    ),
    'ACCOUNTANT': _unique(
        ['view_students', 'view_student_details'],
        FINANCIAL_RECORDS,
        ['view_settings', 'edit_settings'],
        BASIC_MESSAGING,
    ),
    'TEACHER': _unique(
        ['view_students', 'add_student', 'edit_student', 'view_student_details'],
        TEACHER_MARKS,
        ['view_attendance', 'mark_attendance', 'edit_attendance', 'view_attendance_analytics'],
        ['view_reports', 'view_report_cards', 'generate_report_cards', 'export_reports'],
        ['view_timetables', 'view_teacher_schedule'],
        ['view_weekly_reports', 'submit_reports', 'export_weekly_reports'],
        BASIC_MESSAGING,
        ['view_resources', 'download_resource'],
        PERSONAL_SETTINGS,
    ),
    'SUPER_TEACHER': _unique(
        ['view_students', 'add_student', 'edit_student', 'view_student_details'],
        TEACHER_MARKS,
        ['view_attendance', 'mark_attendance', 'edit_attendance', 'view_attendance_analytics', 'bulk_attendance'],
        ['view_reports', 'view_report_cards', 'generate_report_cards', 'export_reports'],
        ['view_timetables', 'view_teacher_schedule', 'edit_timetable'],
        ['view_weekly_reports', 'submit_reports', 'export_weekly_reports'],
        BASIC_MESSAGING,
        ['view_resources', 'download_resource', 'upload_resource'],
        PERSONAL_SETTINGS,
    ),
    'PARENT': _unique(
        ['view_students', 'manage_assigned_students', 'view_student_details'],
        ['view_attendance', 'view_attendance_analytics'],
        ['view_financial', 'view_payments', 'view_financial_analytics'],
        ['view_reports', 'view_report_cards', 'export_reports'],
        BASIC_MESSAGING,
        PERSONAL_SETTINGS,
    ),
    'SPONSOR': _unique(
        ['view_students', 'view_sponsorships', 'sponsor_student', 'view_sponsor_details'],
        ['view_student_details', 'view_financial', 'view_payments'],
        BASIC_MESSAGING,
        PERSONAL_SETTINGS,
    ),
    'NURSE': _unique(
        ['view_students'],
        BASIC_MESSAGING,
        CLINIC,
        PERSONAL_SETTINGS,
    ),
    # Read-only access to most features
    'SUPERUSER': _unique(
        ['view_students', 'view_teachers', 'view_classes', 'view_streams', 'view_attendance', 'view_financial',
         'view_sponsorships', 'view_reports', 'view_payments', 'view_messages', 'view_settings', 'view_analytics',
         'view_clinic_records', 'view_timetables', 'view_resources', 'view_weekly_reports', 'view_report_cards'],
        ['view_student_details', 'view_attendance_analytics', 'view_financial_analytics',
         'view_sponsorship_analytics', 'view_report_analytics', 'view_payment_analytics', 'view_clinic_analytics',
         'view_teacher_analytics', 'view_class_analytics', 'view_parent_analytics', 'view_dashboard_analytics',
         'view_user_analytics', 'view_system_analytics'],
        ['export_students', 'export_attendance', 'export_financial', 'export_reports', 'export_payments',
         'export_clinic_records', 'export_weekly_reports', 'export_resources', 'export_timetable',
         'export_messages', 'export_settings'],
    ),
    'SPONSORSHIP_COORDINATOR': _unique(
        ['view_students'],
        SPONSORSHIP_MANAGEMENT,
        ['view_student_details'],
        BASIC_MESSAGING,
        PERSONAL_SETTINGS,
    ),
    'SPONSORSHIPS_OVERSEER': _unique(
        ['view_students', 'add_student', 'edit_student', 'view_student_details', 'admit_from_overseer'],
        SPONSORSHIP_MANAGEMENT,
        ['view_financial', 'view_financial_analytics'],
        ['view_attendance', 'view_attendance_analytics'],
        ['view_reports', 'submit_reports', 'export_reports', 'view_report_analytics'],
        ['view_weekly_reports'],
        BASIC_MESSAGING,
        PERSONAL_SETTINGS,
    ),
    'SECRETARY': _unique(
        ['view_students', 'add_student', 'edit_student', 'view_student_details', 're_admit_student',
         'admit_from_overseer'],
        ['view_classes', 'view_streams'],
        ['view_attendance', 'view_attendance_analytics'],
        ['view_financial', 'view_financial_analytics', 'view_payments'],
        ['view_reports', 'view_report_cards', 'export_reports'],
        BASIC_MESSAGING,
        PERSONAL_SETTINGS,
    ),
    'CFO': _unique(
        ['view_cfo_dashboard'],
        FINANCIAL_RECORDS,
        PAYMENTS,
        ['view_settings', 'edit_settings'],
        ['record_school_funding', 'view_school_funding', 'edit_school_funding', 'delete_school_funding',
         'record_foundation_funding', 'view_foundation_funding', 'edit_foundation_funding',
         'delete_foundation_funding', 'record_farm_income', 'view_farm_income', 'edit_farm_income',
         'delete_farm_income', 'record_clinic_income', 'view_clinic_income', 'edit_clinic_income',
         'delete_clinic_income', 'record_expenditure', 'view_expenditure', 'edit_expenditure',
         'delete_expenditure', 'allocate_funds', 'view_fund_allocation', 'edit_fund_allocation',
         'delete_fund_allocation', 'generate_financial_statement', 'view_financial_statements',
         'export_financial_statements', 'view_fund_sources', 'manage_fund_sources', 'export_financial_data',
         'view_financial_reports'],
        BASIC_MESSAGING,
        ['change_password', 'update_profile', 'view_user_preferences'],
        ['view_weekly_reports', 'export_weekly_reports'],
    ),
    # Staff records only, no account creation
    'HR': _unique(
        ['view_staff', 'add_staff', 'edit_staff', 'delete_staff', 'upload_staff_cv', 'upload_staff_passport'],
        ['view_weekly_reports', 'submit_reports', 'export_weekly_reports'],
        ['view_photos', 'view_settings', 'view_financial'],
    ),
    'OPM': _unique(
        ['view_inventory', 'add_inventory', 'edit_inventory', 'delete_inventory'],
        ['view_weekly_reports', 'submit_reports', 'export_weekly_reports'],
        BASIC_MESSAGING,
        PERSONAL_SETTINGS,
    ),
}
# USER is the stored role for teachers
ROLE_DEFAULT_PRIVILEGES['USER'] = ROLE_DEFAULT_PRIVILEGES['TEACHER']

ROLE_DISPLAY_NAMES = {
    'USER': 'Teacher',
    'TEACHER': 'Teacher',
    'ADMIN': 'Administrator',
    'PARENT': 'Parent',
    'NURSE': 'School Nurse',
    'SPONSOR': 'Sponsor',
    'SPONSORSHIPS_OVERSEER': 'Sponsorships Overseer',
    'SUPERUSER': 'Super User',
    'SUPER_TEACHER': 'Super Teacher',
    'SPONSORSHIP_COORDINATOR': 'Sponsorship Coordinator',
    'SECRETARY': 'Secretary',
    'ACCOUNTANT': 'Accountant',
    'CFO': 'Chief Financial Officer',
    'OPM': 'Operations Manager',
    'HR': 'Human Resources',
}


def get_default_privileges_for_role(role):
    """Default privileges for a role (case-insensitive), empty for unknown roles"""
    return list(ROLE_DEFAULT_PRIVILEGES.get((role or '').upper(), []))


def role_has_default_privilege(role, privilege):
    return privilege in get_default_privileges_for_role(role)


def get_role_display_name(role):
    return ROLE_DISPLAY_NAMES.get(role, role)


def get_explicit_privileges(user):
    """Unexpired privileges assigned to the user directly"""
    from .models import UserPrivilege
    now = timezone.now()
    rows = UserPrivilege.objects.filter(user=user).values_list('privilege', 'expires_at')
    return [privilege for privilege, expires_at in rows if expires_at is None or expires_at > now]


def get_effective_privileges(user):
    """Explicit privileges plus the role defaults, sorted"""
    privileges = set(get_explicit_privileges(user))
    privileges.update(get_default_privileges_for_role(user.role))
    return sorted(privileges)


def assign_default_privileges(user):
    """
    Replace a user's privilege rows with their role defaults.
    Returns the number of privileges assigned.
    """
    from .models import UserPrivilege
    defaults = get_default_privileges_for_role(user.role)
    UserPrivilege.objects.filter(user=user).delete()
    UserPrivilege.objects.bulk_create([
        UserPrivilege(user=user, privilege=privilege) for privilege in defaults
    ])
    return len(defaults)
