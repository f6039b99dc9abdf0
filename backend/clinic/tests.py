"""
Comprehensive test suite for Clinic module
Tests: Visit recording, validation, date range queries, updates and deletion
"""
from datetime import datetime
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.clinic.models import ClinicRecord
from backend.clinic.views import parse_when


class ParseWhenTests(TestCase):
    """Test visit date parsing"""

    def test_date_only(self):
        start = parse_when('2025-03-04')
        end = parse_when('2025-03-04', end_of_day=True)
        self.assertTrue(timezone.is_aware(start))
        self.assertEqual((start.hour, start.minute), (0, 0))
        self.assertEqual((end.hour, end.minute), (23, 59))

    def test_datetime(self):
        parsed = parse_when('2025-03-04T10:30:00Z')
        self.assertEqual(parsed.hour, 10)

    def test_invalid(self):
        self.assertIsNone(parse_when('yesterday'))
        self.assertIsNone(parse_when(''))
        self.assertIsNone(parse_when('2025-13-45'))


class ClinicRecordTests(TestCase):
    """Test clinic visit endpoints"""

    def setUp(self):
        self.nurse = TestDataFactory.create_user(role='NURSE')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.nurse)
        self.payload = {
            'student_id': '7',
            'student_name': 'Akello Grace',
            'access_number': 'AA0007',
            'nurse_id': str(self.nurse.id),
            'nurse_name': 'Nurse Joy',
            'visit_date': '2025-03-04T09:00:00Z',
            'symptoms': 'Headache',
        }

    def test_record_visit(self):
        response = self.client.post('/api/v1/clinic/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = ClinicRecord.objects.get()
        self.assertEqual(record.status, 'resolved')
        self.assertEqual(record.cost, Decimal('0.00'))

    def test_missing_fields(self):
        data = dict(self.payload)
        del data['nurse_name']
        response = self.client.post('/api/v1/clinic/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_visit_date(self):
        response = self.client.post('/api/v1/clinic/', {**self.payload, 'visit_date': 'soon'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid visit date format')

    def test_unparseable_follow_up_dropped(self):
        data = {**self.payload, 'follow_up_required': True, 'follow_up_date': 'next week'}
        response = self.client.post('/api/v1/clinic/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(ClinicRecord.objects.get().follow_up_date)

    def test_teacher_cannot_record(self):
        teacher = TestDataFactory.create_user(role='TEACHER')
        self.client.authenticate_user(teacher)
        response = self.client.post('/api/v1/clinic/', self.payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_by_student(self):
        TestDataFactory.create_clinic_record(student_id='7')
        TestDataFactory.create_clinic_record(student_id='8')
        response = self.client.get('/api/v1/clinic/', {'student_id': '7'})
        self.assertEqual(len(response.data), 1)

    def test_date_range_inclusive(self):
        """The end date covers the whole day"""
        day = timezone.make_aware(datetime(2025, 3, 4, 18, 0))
        TestDataFactory.create_clinic_record(visit_date=day)
        TestDataFactory.create_clinic_record(visit_date=timezone.make_aware(datetime(2025, 3, 6, 8, 0)))
        response = self.client.get('/api/v1/clinic/date-range/', {'start': '2025-03-01', 'end': '2025-03-04'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/clinic/date-range/', {'startDate': '2025-03-01', 'endDate': '2025-03-06'})
        self.assertEqual(len(response.data), 2)

    def test_date_range_requires_both_dates(self):
        response = self.client.get('/api/v1/clinic/date-range/', {'start': '2025-03-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_only_clinical_fields(self):
        record = TestDataFactory.create_clinic_record(student_name='Original')
        data = {'diagnosis': 'Malaria', 'status': 'referred', 'student_name': 'Changed'}
        response = self.client.patch(f'/api/v1/clinic/{record.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        record.refresh_from_db()
        self.assertEqual(record.diagnosis, 'Malaria')
        self.assertEqual(record.status, 'referred')
        self.assertEqual(record.student_name, 'Original')

    def test_delete(self):
        record = TestDataFactory.create_clinic_record()
        response = self.client.delete(f'/api/v1/clinic/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Clinic record deleted successfully')
        self.assertFalse(ClinicRecord.objects.exists())
