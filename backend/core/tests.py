"""
Comprehensive test suite for Core module
Tests: Login and lockout, password flows, user administration, privileges, notifications, settings and audit logs
"""
from datetime import timedelta
from io import StringIO

from django.conf import settings
from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import User, UserPrivilege, Notification, SchoolSettings, AuditLog
from backend.core.permissions import user_has_privilege, is_school_admin
from backend.core.privileges import (
    get_default_privileges_for_role, get_effective_privileges, assign_default_privileges, role_has_default_privilege
)


class PrivilegeHelperTests(TestCase):
    """Test role defaults and effective privileges"""

    def test_role_defaults_case_insensitive(self):
        self.assertEqual(get_default_privileges_for_role('nurse'), get_default_privileges_for_role('NURSE'))
        self.assertEqual(get_default_privileges_for_role('UNKNOWN'), [])

    def test_teacher_stored_as_user_role(self):
        self.assertEqual(get_default_privileges_for_role('USER'), get_default_privileges_for_role('TEACHER'))

    def test_admin_has_every_privilege(self):
        admin = TestDataFactory.create_user(role='ADMIN')
        self.assertTrue(is_school_admin(admin))
        self.assertTrue(user_has_privilege(admin, 'anything_at_all'))

    def test_explicit_privilege_expiry(self):
        """Expired explicit privileges are not effective"""
        nurse = TestDataFactory.create_user(role='NURSE')
        UserPrivilege.objects.create(user=nurse, privilege='process_payment',
                                     expires_at=timezone.now() - timedelta(days=1))
        UserPrivilege.objects.create(user=nurse, privilege='view_financial')
        effective = get_effective_privileges(nurse)
        self.assertNotIn('process_payment', effective)
        self.assertIn('view_financial', effective)
        self.assertFalse(user_has_privilege(nurse, 'process_payment'))
        self.assertTrue(user_has_privilege(nurse, 'view_financial'))

    def test_role_default_privilege(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        self.assertTrue(role_has_default_privilege('nurse', 'view_clinic_records'))
        self.assertTrue(user_has_privilege(nurse, 'view_clinic_records'))
        self.assertFalse(user_has_privilege(nurse, 'add_student'))

    def test_assign_default_privileges_replaces_rows(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        UserPrivilege.objects.create(user=nurse, privilege='delete_student')
        count = assign_default_privileges(nurse)
        self.assertEqual(count, len(get_default_privileges_for_role('NURSE')))
        self.assertFalse(nurse.privileges.filter(privilege='delete_student').exists())


class LoginTests(TestCase):
    """Test email login, attempt counting and lockout"""

    def setUp(self):
        self.client = APIClient()
        self.user = TestDataFactory.create_user(email='teacher@school.com', password='secret!1', role='TEACHER')

    def login(self, password, email='teacher@school.com'):
        return self.client.post('/api/v1/auth/login/', {'email': email, 'password': password}, format='json')

    def test_login_success(self):
        response = self.login('secret!1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertIn('view_students', response.data['privileges'])
        self.assertTrue(AuditLog.objects.filter(action='login', object_id=str(self.user.id)).exists())

    def test_login_email_case_insensitive(self):
        response = self.login('secret!1', email='TEACHER@school.com')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_missing_fields(self):
        response = self.client.post('/api/v1/auth/login/', {'email': 'teacher@school.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_email(self):
        response = self.login('secret!1', email='nobody@school.com')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_wrong_password_counts_attempts(self):
        response = self.login('wrong')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['attemptsRemaining'], settings.LOGIN_MAX_ATTEMPTS - 1)
        self.user.refresh_from_db()
        self.assertEqual(self.user.password_attempts, 1)

    def test_lockout_after_max_attempts(self):
        """The right password is refused while the lockout window is open"""
        for _ in range(settings.LOGIN_MAX_ATTEMPTS):
            response = self.login('wrong')
        self.assertEqual(response.data['attemptsRemaining'], 0)
        response = self.login('secret!1')
        self.assertEqual(response.status_code, status.HTTP_423_LOCKED)
        self.assertIn('remainingTime', response.data)

    def test_lockout_notifies_admins(self):
        admin = TestDataFactory.create_user(role='ADMIN')
        for _ in range(settings.LOGIN_MAX_ATTEMPTS):
            self.login('wrong')
        self.assertTrue(Notification.objects.filter(user=admin, type='WARNING').exists())

    def test_lockout_window_expires(self):
        self.user.password_attempts = settings.LOGIN_MAX_ATTEMPTS
        self.user.last_password_attempt = timezone.now() - timedelta(minutes=settings.LOGIN_LOCKOUT_MINUTES + 1)
        self.user.save()
        response = self.login('secret!1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.password_attempts, 0)

    def test_admin_locked_account(self):
        self.user.account_locked = True
        self.user.lock_reason = 'Left the school'
        self.user.save()
        response = self.login('secret!1')
        self.assertEqual(response.status_code, status.HTTP_423_LOCKED)
        self.assertTrue(response.data['accountLocked'])
        self.assertEqual(response.data['lockReason'], 'Left the school')

    def test_first_time_login_requires_password_change(self):
        self.user.first_time_login = True
        self.user.save()
        response = self.login('secret!1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['requiresPasswordChange'])
        self.assertNotIn('access', response.data)

    def test_disabled_account(self):
        self.user.is_active = False
        self.user.save()
        response = self.login('secret!1')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class PasswordFlowTests(TestCase):
    """Test password change, reset links and reset requests"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.user = TestDataFactory.create_user(email='nurse@school.com', password='old!pass', role='NURSE')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_change_password_rules(self):
        client = APIClient()
        base = {'userId': self.user.id, 'oldPassword': 'old!pass'}
        response = client.post('/api/v1/auth/change-password/',
                               {**base, 'newPassword': 'abc!1', 'confirmPassword': 'abc!2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = client.post('/api/v1/auth/change-password/',
                               {**base, 'newPassword': 'abcdef', 'confirmPassword': 'abcdef'}, format='json')
        self.assertIn('symbol', response.data['error'])
        response = client.post('/api/v1/auth/change-password/',
                               {**base, 'oldPassword': 'nope', 'newPassword': 'new!pass', 'confirmPassword': 'new!pass'},
                               format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_non_numeric_user_id(self):
        data = {'userId': 'abc', 'oldPassword': 'old!pass', 'newPassword': 'new!pass', 'confirmPassword': 'new!pass'}
        response = APIClient().post('/api/v1/auth/change-password/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid user ID')
        response = self.client.post('/api/v1/auth/provide-temp-password/',
                                    {'userId': 'abc', 'tempPassword': 'temp!1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_change_password_clears_first_time_login(self):
        self.user.first_time_login = True
        self.user.save()
        response = APIClient().post('/api/v1/auth/change-password/', {
            'userId': self.user.id, 'oldPassword': 'old!pass',
            'newPassword': 'new!pass', 'confirmPassword': 'new!pass'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.user.refresh_from_db()
        self.assertFalse(self.user.first_time_login)
        self.assertTrue(self.user.check_password('new!pass'))

    def test_reset_link_flow(self):
        response = self.client.post(f'/api/v1/users/{self.user.id}/generate-reset-link/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        token = response.data['token']
        self.assertIn(token, response.data['resetLink'])

        anonymous = APIClient()
        response = anonymous.post('/api/v1/auth/verify-reset-token/',
                                  {'token': token, 'email': 'nurse@school.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = anonymous.post('/api/v1/auth/reset-password/', {
            'token': token, 'email': 'nurse@school.com',
            'newPassword': 'brandnew', 'confirmPassword': 'brandnew'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertIsNone(self.user.reset_token)
        self.assertTrue(self.user.check_password('brandnew'))

    def test_expired_reset_token(self):
        self.user.reset_token = 'expired-token'
        self.user.reset_token_expiry = timezone.now() - timedelta(hours=1)
        self.user.save()
        response = APIClient().post('/api/v1/auth/verify-reset-token/',
                                    {'token': 'expired-token', 'email': 'nurse@school.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_forgot_password_notifies_admins(self):
        response = APIClient().post('/api/v1/auth/forgot-password/', {'email': 'nurse@school.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Notification.objects.filter(user=self.admin, type='PASSWORD_RESET').count(), 1)
        response = APIClient().post('/api/v1/auth/forgot-password/', {'email': 'ghost@school.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_provide_temp_password(self):
        response = self.client.post('/api/v1/auth/provide-temp-password/',
                                    {'userId': self.user.id, 'tempPassword': 'temp!123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.first_time_login)
        self.assertTrue(self.user.notifications.filter(type='PASSWORD_RESET').exists())


class UserAdministrationTests(TestCase):
    """Test user management, locking and privilege assignment"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_user_assigns_defaults(self):
        data = {'name': 'Jane Nurse', 'email': 'jane@school.com', 'password': 'pass!word', 'role': 'nurse'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='jane@school.com')
        self.assertEqual(user.role, 'NURSE')
        self.assertEqual(user.username, 'jane@school.com')
        self.assertEqual(user.privileges.count(), len(get_default_privileges_for_role('NURSE')))

    def test_update_role_any_case(self):
        user = TestDataFactory.create_user(role='TEACHER')
        response = self.client.patch(f'/api/v1/users/{user.id}/', {'role': 'nurse'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.role, 'NURSE')

    def test_non_admin_cannot_list_users(self):
        teacher = TestDataFactory.create_user(role='TEACHER')
        self.client.authenticate_user(teacher)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_super_admin_protected(self):
        protected = TestDataFactory.create_user(email=settings.SUPER_ADMIN_EMAIL)
        response = self.client.delete(f'/api/v1/users/{protected.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(f'/api/v1/users/{protected.id}/privileges/',
                                    {'privilege': 'view_students'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_lock_and_unlock_admin_lock(self):
        user = TestDataFactory.create_user(role='TEACHER')
        response = self.client.post(f'/api/v1/users/{user.id}/lock/', {'reason': 'Suspended'}, format='json')
        self.assertEqual(response.data['lockType'], 'permanent')
        user.refresh_from_db()
        self.assertTrue(user.account_locked)
        self.assertEqual(user.status, 'INACTIVE')

        response = self.client.post(f'/api/v1/users/{user.id}/unlock/', {}, format='json')
        self.assertEqual(response.data['lockType'], 'admin')
        user.refresh_from_db()
        self.assertFalse(user.account_locked)
        self.assertEqual(user.status, 'ACTIVE')

    def test_temporary_lock(self):
        user = TestDataFactory.create_user(role='TEACHER')
        until = (timezone.now() + timedelta(hours=2)).isoformat()
        response = self.client.post(f'/api/v1/users/{user.id}/lock/', {'lockUntil': until}, format='json')
        self.assertEqual(response.data['lockType'], 'temporary')
        user.refresh_from_db()
        self.assertTrue(user.is_temporarily_locked)

    def test_unlock_password_lock_requires_new_password(self):
        user = TestDataFactory.create_user(role='TEACHER')
        user.password_attempts = settings.LOGIN_MAX_ATTEMPTS
        user.locked_until = timezone.now() + timedelta(minutes=5)
        user.save()
        response = self.client.post(f'/api/v1/users/{user.id}/unlock/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['requiresNewPassword'])
        response = self.client.post(f'/api/v1/users/{user.id}/unlock/', {'newPassword': 'fresh!pw'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.password_attempts, 0)
        self.assertTrue(user.first_time_login)

    def test_unlock_not_locked(self):
        user = TestDataFactory.create_user(role='TEACHER')
        response = self.client.post(f'/api/v1/users/{user.id}/unlock/', {}, format='json')
        self.assertFalse(response.data['success'])

    def test_privilege_add_remove_reset(self):
        user = TestDataFactory.create_user(role='NURSE')
        url = f'/api/v1/users/{user.id}/privileges/'
        response = self.client.post(url, {'privilege': 'view_financial'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post(url, {'privilege': 'view_financial'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(f'{url}view_financial/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.post(f'/api/v1/users/{user.id}/reset-privileges/',
                                    {'privileges': ['view_sponsorships', 'view_sponsorships']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(list(user.privileges.values_list('privilege', flat=True)), ['view_sponsorships'])

    def test_assign_students_to_parent(self):
        parent = TestDataFactory.create_user(role='PARENT')
        student = TestDataFactory.create_student()
        response = self.client.post(f'/api/v1/users/{parent.id}/assign-students/',
                                    {'studentIds': [student.id, 99999]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['missing'], [99999])

        response = self.client.post(f'/api/v1/users/{parent.id}/assign-students/',
                                    {'studentIds': [student.id]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.authenticate_user(parent)
        response = self.client.get(f'/api/v1/users/{parent.id}/assigned-students/')
        self.assertEqual([s['id'] for s in response.data], [student.id])

    def test_assign_students_only_to_parents(self):
        teacher = TestDataFactory.create_user(role='TEACHER')
        response = self.client.post(f'/api/v1/users/{teacher.id}/assign-students/',
                                    {'studentIds': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_user_me(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertTrue(response.data['is_admin'])
        self.assertEqual(response.data['role_display'], 'Administrator')


class NotificationTests(TestCase):
    """Test notification listing and read state"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='TEACHER')
        self.other = TestDataFactory.create_user(role='TEACHER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.notification = Notification.objects.create(user=self.user, title='Hi', message='Hello')

    def test_list_and_count(self):
        response = self.client.get(f'/api/v1/notifications/{self.user.id}/')
        self.assertEqual(len(response.data), 1)
        response = self.client.get(f'/api/v1/notifications/{self.user.id}/unread-count/')
        self.assertEqual(response.data['count'], 1)

    def test_cannot_read_other_users_notifications(self):
        response = self.client.get(f'/api/v1/notifications/{self.other.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_mark_read(self):
        response = self.client.put(f'/api/v1/notifications/{self.notification.id}/read/')
        self.assertTrue(response.data['read'])


class SchoolSettingsTests(TestCase):
    """Test the settings singleton and its cache"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_load_without_row(self):
        settings_row = SchoolSettings.load()
        self.assertEqual(settings_row.current_term, 'Term 1')
        self.assertEqual(settings_row.current_year, str(timezone.now().year))

    def test_singleton(self):
        SchoolSettings(school_name='A').save()
        SchoolSettings(school_name='B').save()
        self.assertEqual(SchoolSettings.objects.count(), 1)
        self.assertEqual(SchoolSettings.load().school_name, 'B')

    def test_update_invalidates_cache(self):
        self.client.get('/api/v1/settings/')
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.put('/api/v1/settings/', {'current_term': 'Term 2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get('/api/v1/settings/')
        self.assertEqual(response.data['current_term'], 'Term 2')

    def test_non_admin_cannot_update(self):
        teacher = TestDataFactory.create_user(role='TEACHER')
        self.client.authenticate_user(teacher)
        response = self.client.put('/api/v1/settings/', {'current_term': 'Term 2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_security_settings_must_be_object(self):
        response = self.client.post('/api/v1/settings/security/', {'securitySettings': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/settings/security/',
                                    {'securitySettings': {'sessionTimeout': 30}}, format='json')
        self.assertEqual(SchoolSettings.load().security_settings, {'sessionTimeout': 30})


class AuditLogTests(TestCase):
    """Test audit log visibility"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.teacher = TestDataFactory.create_user(role='TEACHER')
        self.admin_log = AuditLog.objects.create(user=self.admin, action='create', model_name='Student', object_id='1')
        self.teacher_log = AuditLog.objects.create(user=self.teacher, action='update', model_name='Student',
                                                   object_id='1')
        self.client = AuthenticatedAPIClient()

    def test_admin_sees_all(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/audit-logs/', {'action': 'update'})
        self.assertEqual(len(response.data), 1)

    def test_non_admin_sees_own(self):
        self.client.authenticate_user(self.teacher)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual([log['id'] for log in response.data], [self.teacher_log.id])
        response = self.client.get(f'/api/v1/audit-logs/{self.admin_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class GlobalSearchTests(TestCase):
    """Test search across students, staff, users and inventory"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN', name='Okello Admin')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_search(self):
        TestDataFactory.create_student(name='Okello Peter')
        TestDataFactory.create_staff(name='Okello Jane')
        TestDataFactory.create_inventory_item(name='Projector', location='Okello Hall')
        response = self.client.get('/api/v1/search/', {'q': 'okello'})
        self.assertEqual(len(response.data['students']), 1)
        self.assertEqual(len(response.data['staff']), 1)
        self.assertEqual(len(response.data['users']), 1)
        self.assertEqual(len(response.data['inventory']), 1)

    def test_empty_query(self):
        response = self.client.get('/api/v1/search/')
        self.assertEqual(response.data['students'], [])

    def test_parent_only_finds_assigned_students(self):
        mine = TestDataFactory.create_student(name='Mine Kid')
        TestDataFactory.create_student(name='Other Kid')
        parent = TestDataFactory.create_user(role='PARENT', student_ids=[mine.id])
        self.client.authenticate_user(parent)
        response = self.client.get('/api/v1/search/', {'q': 'Kid'})
        self.assertEqual([s['name'] for s in response.data['students']], ['Mine Kid'])
        self.assertEqual(response.data['users'], [])


class CoreCommandTests(TestCase):
    """Test core management commands"""

    def test_ensure_school_settings(self):
        call_command('ensure_school_settings', '--year', '2026', '--term', 'Term 2', stdout=StringIO())
        settings_row = SchoolSettings.objects.get()
        self.assertEqual(settings_row.current_year, '2026')
        self.assertEqual(settings_row.current_term, 'Term 2')

    def test_assign_default_privileges_by_role(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        teacher = TestDataFactory.create_user(role='TEACHER')
        call_command('assign_default_privileges', '--role', 'nurse', stdout=StringIO())
        self.assertTrue(nurse.privileges.exists())
        self.assertFalse(teacher.privileges.exists())
