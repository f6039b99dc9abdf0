"""
Comprehensive test suite for Reports module
Tests: Weekly report submission, queries, updates, admin grouping, statistics and the dashboard
"""
from datetime import datetime, timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import Notification
from backend.reports.models import WeeklyReport


def submitted_on(report, year, month, day, hour=10):
    """Move a report's submission time"""
    when = timezone.make_aware(datetime(year, month, day, hour, 0))
    WeeklyReport.objects.filter(pk=report.pk).update(submitted_at=when)
    return when


class WeeklyReportTests(TestCase):
    """Test weekly report endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.teacher = TestDataFactory.create_user(role='TEACHER', name='Mr Okot')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.teacher)

    def test_submit_report(self):
        """Submitting a report notifies every admin"""
        data = {
            'user_id': self.teacher.id,
            'user_name': 'Mr Okot',
            'user_role': 'TEACHER',
            'content': 'Covered fractions',
            'week_start': '2025-03-03',
            'week_end': '2025-03-09',
            'achievements': ['All lessons taught'],
        }
        response = self.client.post('/api/v1/reports/weekly/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        report = WeeklyReport.objects.get()
        self.assertEqual(report.user_id, str(self.teacher.id))
        self.assertEqual(report.status, 'submitted')
        notification = Notification.objects.get(user=self.admin)
        self.assertEqual(notification.type, 'WEEKLY_REPORT')
        self.assertIn('2025-03-03 - 2025-03-09', notification.message)

    def test_required_fields(self):
        """Test submission without content"""
        response = self.client.post('/api/v1/reports/weekly/',
                                    {'user_id': '1', 'user_name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'User ID, name, and content are required')

    def test_week_end_before_start(self):
        data = {'user_id': '1', 'user_name': 'X', 'content': 'c', 'week_start': '2025-03-09',
                'week_end': '2025-03-03'}
        response = self.client.post('/api/v1/reports/weekly/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_list_json_fields_dropped(self):
        data = {'user_id': '1', 'user_name': 'X', 'content': 'c', 'challenges': 'none really'}
        self.client.post('/api/v1/reports/weekly/', data, format='json')
        self.assertIsNone(WeeklyReport.objects.get().challenges)

    def test_nurse_cannot_submit(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        self.client.authenticate_user(nurse)
        response = self.client.post('/api/v1/reports/weekly/',
                                    {'user_id': '1', 'user_name': 'X', 'content': 'c'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_reports_by_user(self):
        TestDataFactory.create_weekly_report(user_id=self.teacher.id)
        TestDataFactory.create_weekly_report(user_id='999')
        response = self.client.get(f'/api/v1/reports/weekly/user/{self.teacher.id}/')
        self.assertEqual(len(response.data), 1)

    def test_reports_by_week(self):
        """The week covers the start day and the six days after it"""
        inside = TestDataFactory.create_weekly_report()
        last_day = TestDataFactory.create_weekly_report()
        outside = TestDataFactory.create_weekly_report()
        submitted_on(inside, 2025, 3, 3)
        submitted_on(last_day, 2025, 3, 9, hour=23)
        submitted_on(outside, 2025, 3, 10)
        response = self.client.get('/api/v1/reports/weekly/week/2025-03-03/')
        self.assertEqual({r['id'] for r in response.data}, {inside.id, last_day.id})

    def test_reports_by_week_invalid_date(self):
        response = self.client.get('/api/v1/reports/weekly/week/2025-13-45/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_ignores_empty_values(self):
        report = TestDataFactory.create_weekly_report(content='Original')
        data = {'content': '', 'status': 'reviewed', 'user_name': 'Someone else'}
        response = self.client.put(f'/api/v1/reports/weekly/{report.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        report.refresh_from_db()
        self.assertEqual(report.content, 'Original')
        self.assertEqual(report.status, 'reviewed')
        self.assertEqual(report.user_name, 'Teacher Test')

    def test_update_missing_report(self):
        response = self.client.put('/api/v1/reports/weekly/99999/', {'content': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Weekly report not found')

    def test_delete(self):
        report = TestDataFactory.create_weekly_report()
        response = self.client.delete(f'/api/v1/reports/weekly/{report.id}/')
        self.assertEqual(response.data['message'], 'Weekly report deleted successfully')
        self.assertFalse(WeeklyReport.objects.exists())


class WeeklyReportAdminTests(TestCase):
    """Test grouped views and statistics"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_grouped_by_month_and_day(self):
        first = TestDataFactory.create_weekly_report(user_name='Alice')
        second = TestDataFactory.create_weekly_report(user_name='Bob')
        third = TestDataFactory.create_weekly_report(user_name='Alice')
        submitted_on(first, 2025, 2, 20)
        submitted_on(second, 2025, 3, 4, hour=9)
        submitted_on(third, 2025, 3, 4, hour=15)

        response = self.client.get('/api/v1/reports/weekly/admin/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([m['month'] for m in response.data], ['2025-03', '2025-02'])
        march = response.data[0]
        self.assertEqual(march['monthName'], 'March 2025')
        self.assertEqual(len(march['weeks']), 1)
        week = march['weeks'][0]
        self.assertEqual(week['weekStart'], '2025-03-04')
        self.assertEqual(week['weekEnd'], '2025-03-10')
        self.assertEqual(week['reportCount'], 2)
        self.assertEqual(sorted(week['users']), ['Alice', 'Bob'])

    def test_admin_view_requires_privilege(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        self.client.authenticate_user(nurse)
        response = self.client.get('/api/v1/reports/weekly/admin/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_stats(self):
        TestDataFactory.create_weekly_report(user_id='1')
        TestDataFactory.create_weekly_report(user_id='1')
        old = TestDataFactory.create_weekly_report(user_id='2')
        WeeklyReport.objects.filter(pk=old.pk).update(submitted_at=timezone.now() - timedelta(days=30))
        response = self.client.get('/api/v1/reports/weekly/stats/')
        self.assertEqual(response.data['totalReports'], 3)
        self.assertEqual(response.data['thisWeekReports'], 2)
        self.assertEqual(response.data['uniqueUsers'], 2)
        self.assertEqual(response.data['averageReportsPerUser'], 1.5)

    def test_stats_empty(self):
        response = self.client.get('/api/v1/reports/weekly/stats/')
        self.assertEqual(response.data['averageReportsPerUser'], 0)


class DashboardTests(TestCase):
    """Test the dashboard statistics"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_settings(term='Term 1', year='2025')

    def test_dashboard_counts(self):
        TestDataFactory.create_student(status='active')
        TestDataFactory.create_student(status='active')
        TestDataFactory.create_staff()
        TestDataFactory.create_financial_record(amount=Decimal('30000'))
        TestDataFactory.create_financial_record(amount=Decimal('20000'), term='Term 2')
        TestDataFactory.create_clinic_record()
        TestDataFactory.create_attendance(status='present')
        TestDataFactory.create_attendance(student_id='2', status='absent')

        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['term'], 'Term 1')
        self.assertEqual(response.data['totalStudents'], 2)
        self.assertEqual(response.data['studentsByStatus'], {'active': 2})
        self.assertEqual(response.data['totalStaff'], 1)
        self.assertEqual(response.data['paymentsThisTerm'], {'count': 1, 'total': 30000.0})
        self.assertEqual(response.data['clinicVisitsThisMonth'], 1)
        self.assertEqual(response.data['attendanceToday'], {'present': 1, 'absent': 1})

    def test_dashboard_cache_dropped_on_change(self):
        """A new student shows up once the transaction commits"""
        self.client.get('/api/v1/reports/dashboard/')
        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_student()
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['totalStudents'], 1)
