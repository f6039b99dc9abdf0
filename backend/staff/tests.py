"""
Comprehensive test suite for Staff module
Tests: Staff records, document uploads, salary payments and payment summaries
"""
import shutil
import tempfile
from decimal import Decimal

from django.test import TestCase, override_settings
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.billing.models import FinancialRecord
from backend.staff.models import Staff

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class StaffRecordTests(TestCase):
    """Test staff CRUD and documents"""

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.user = TestDataFactory.create_user(role='HR')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_staff(self):
        data = {'name': '  Mary Achieng ', 'role': 'Teacher', 'phone': '0700000000', 'attachments': '["a.pdf"]'}
        response = self.client.post('/api/v1/staff/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        staff = Staff.objects.get()
        self.assertEqual(staff.name, 'Mary Achieng')
        self.assertEqual(staff.attachments, ['a.pdf'])

    def test_create_requires_name(self):
        response = self.client.post('/api/v1/staff/', {'role': 'Teacher'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name is required')

    def test_create_requires_privilege(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        self.client.authenticate_user(nurse)
        response = self.client.post('/api/v1/staff/', {'name': 'Someone'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filters_by_role(self):
        TestDataFactory.create_staff(role='Teacher')
        TestDataFactory.create_staff(role='Cook')
        response = self.client.get('/api/v1/staff/', {'role': 'Cook'})
        self.assertEqual(len(response.data), 1)

    def test_cv_upload_and_download(self):
        """A CV uploaded on create can be downloaded as an attachment"""
        data = {
            'name': 'John Okot',
            'cvFile': {
                'fileData': TestDataFactory.text_data_uri('%PDF-1.4 cv', 'application/pdf'),
                'fileType': 'application/pdf'
            }
        }
        response = self.client.post('/api/v1/staff/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['has_cv'])

        staff = Staff.objects.get()
        response = self.client.get(f'/api/v1/staff/{staff.id}/cv-download/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('attachment', response['Content-Disposition'])
        self.assertEqual(b''.join(response.streaming_content), b'%PDF-1.4 cv')
        response.close()

    def test_passport_photo(self):
        staff = TestDataFactory.create_staff()
        data = {'passportPhoto': {'fileData': TestDataFactory.png_data_uri(), 'fileType': 'image/png'}}
        response = self.client.patch(f'/api/v1/staff/{staff.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['has_passport_photo'])
        response = self.client.get(f'/api/v1/staff/{staff.id}/passport/')
        self.assertEqual(response['Content-Type'], 'image/png')
        response.close()

    def test_invalid_passport_photo_rejected(self):
        data = {
            'name': 'Bad Photo',
            'passportPhoto': {'fileData': TestDataFactory.text_data_uri('not an image'), 'fileType': 'image/jpeg'}
        }
        response = self.client.post('/api/v1/staff/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Staff.objects.count(), 0)

    def test_invalid_photo_leaves_update_unsaved(self):
        """A rejected upload keeps the other fields unchanged too"""
        staff = TestDataFactory.create_staff(name='Old Name')
        data = {
            'name': 'New Name',
            'passportPhoto': {'fileData': TestDataFactory.text_data_uri('not an image'), 'fileType': 'image/jpeg'}
        }
        response = self.client.put(f'/api/v1/staff/{staff.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        staff.refresh_from_db()
        self.assertEqual(staff.name, 'Old Name')
        self.assertFalse(staff.passport_photo)

    def test_missing_documents(self):
        staff = TestDataFactory.create_staff()
        response = self.client.get(f'/api/v1/staff/{staff.id}/cv-download/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(f'/api/v1/staff/{staff.id}/passport/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_staff(self):
        staff = TestDataFactory.create_staff()
        response = self.client.delete(f'/api/v1/staff/{staff.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Staff.objects.exists())


class StaffPaymentTests(TestCase):
    """Test salary payments"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_settings(term='Term 2', year='2025')
        self.staff = TestDataFactory.create_staff(role='Teacher', amount_to_pay=Decimal('500000'))

    def test_pay_staff(self):
        response = self.client.post(f'/api/v1/staff/{self.staff.id}/pay/', {'amount': 200000}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = FinancialRecord.objects.get()
        self.assertEqual(record.type, 'staff_payment')
        self.assertEqual(record.student_id, f'staff:{self.staff.id}')
        self.assertEqual(record.term, 'Term 2')

    def test_pay_invalid_amount(self):
        for amount in ('', 'abc', 0, -1):
            response = self.client.post(f'/api/v1/staff/{self.staff.id}/pay/', {'amount': amount}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pay_requires_privilege(self):
        hr = TestDataFactory.create_user(role='HR')
        self.client.authenticate_user(hr)
        response = self.client.post(f'/api/v1/staff/{self.staff.id}/pay/', {'amount': 10}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_payment_summary(self):
        self.client.post(f'/api/v1/staff/{self.staff.id}/pay/', {'amount': 200000}, format='json')
        response = self.client.get(f'/api/v1/staff/{self.staff.id}/payments/summary/')
        self.assertEqual(response.data['totalPaid'], 200000.0)
        self.assertEqual(response.data['remaining'], 300000.0)
        self.assertEqual(len(response.data['payments']), 1)

    def test_payment_list_with_role_filter(self):
        cook = TestDataFactory.create_staff(role='Cook')
        self.client.post(f'/api/v1/staff/{self.staff.id}/pay/', {'amount': 1000}, format='json')
        self.client.post(f'/api/v1/staff/{cook.id}/pay/', {'amount': 2000}, format='json')
        response = self.client.get('/api/v1/staff/payments/list/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/v1/staff/payments/list/', {'role': 'Cook'})
        self.assertEqual([item['staffId'] for item in response.data], [cook.id])
        self.assertEqual(response.data[0]['staff']['name'], cook.name)
