"""
Comprehensive test suite for Attendance module
Tests: Marking, one-record-per-day overwrites, queries by student and date, updates and daily placeholders
"""
from datetime import date

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.attendance.models import Attendance


class AttendanceTests(TestCase):
    """Test attendance endpoints"""

    def setUp(self):
        self.teacher = TestDataFactory.create_user(role='TEACHER')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.teacher)
        self.payload = {
            'student_id': '3',
            'date': '2025-02-10T07:45:00Z',
            'status': 'present',
            'teacher_id': str(self.teacher.id),
            'teacher_name': 'Mr Teacher',
        }

    def test_mark_attendance(self):
        response = self.client.post('/api/v1/attendance/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = Attendance.objects.get()
        self.assertEqual(record.date, date(2025, 2, 10))
        self.assertTrue(record.time)

    def test_marking_again_overwrites(self):
        """A student has at most one record per day"""
        self.client.post('/api/v1/attendance/', self.payload, format='json')
        self.client.post('/api/v1/attendance/', {**self.payload, 'status': 'late', 'time': '08:15'}, format='json')
        record = Attendance.objects.get()
        self.assertEqual(record.status, 'late')
        self.assertEqual(record.time, '08:15')

    def test_validation(self):
        response = self.client.post('/api/v1/attendance/', {**self.payload, 'status': 'sleeping'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post('/api/v1/attendance/', {**self.payload, 'date': 'monday'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        data = dict(self.payload)
        del data['teacher_name']
        response = self.client.post('/api/v1/attendance/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_nurse_cannot_mark(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        self.client.authenticate_user(nurse)
        response = self.client.post('/api/v1/attendance/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_by_student_and_date(self):
        TestDataFactory.create_attendance(student_id='3', date=date(2025, 2, 10), time='09:00')
        TestDataFactory.create_attendance(student_id='4', date=date(2025, 2, 10), time='08:00')
        TestDataFactory.create_attendance(student_id='3', date=date(2025, 2, 11))
        response = self.client.get('/api/v1/attendance/student/3/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/attendance/date/2025-02-10/')
        self.assertEqual([r['student_id'] for r in response.data], ['4', '3'])
        response = self.client.get('/api/v1/attendance/date/not-a-date/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_limited_fields(self):
        record = TestDataFactory.create_attendance(student_id='3')
        data = {'status': 'excused', 'remarks': 'Sick note', 'student_id': '99'}
        response = self.client.patch(f'/api/v1/attendance/{record.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        record.refresh_from_db()
        self.assertEqual(record.status, 'excused')
        self.assertEqual(record.remarks, 'Sick note')
        self.assertEqual(record.student_id, '3')

    def test_empty_status_ignored_on_update(self):
        record = TestDataFactory.create_attendance(status='absent')
        self.client.patch(f'/api/v1/attendance/{record.id}/', {'status': '', 'remarks': 'x'}, format='json')
        record.refresh_from_db()
        self.assertEqual(record.status, 'absent')

    def test_ensure_daily_placeholders(self):
        first = TestDataFactory.create_student()
        second = TestDataFactory.create_student()
        TestDataFactory.create_attendance(student_id=first.id, date=date(2025, 2, 12))
        response = self.client.post('/api/v1/attendance/ensure-daily/', {'date': '2025-02-12'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['created'], 1)
        self.assertEqual(response.data['totalStudents'], 2)
        placeholder = Attendance.objects.get(student_id=str(second.id))
        self.assertEqual(placeholder.status, 'not_marked')
        self.assertEqual(placeholder.teacher_id, 'system')

        response = self.client.post('/api/v1/attendance/ensure-daily/', {'date': '2025-02-12'}, format='json')
        self.assertEqual(response.data['created'], 0)

    def test_ensure_daily_refreshes_dashboard(self):
        """Placeholders show up in today's dashboard counts once committed"""
        cache.clear()
        TestDataFactory.create_student()
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['attendanceToday'], {})
        with self.captureOnCommitCallbacks(execute=True):
            self.client.post('/api/v1/attendance/ensure-daily/', {}, format='json')
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.data['attendanceToday'], {'not_marked': 1})
