"""
Comprehensive test suite for Students module
Tests: Admission, numbering, duplicate prevention, flagging, dropped access numbers, conduct notes and classes
"""
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.students.models import Student, DroppedAccessNumber
from backend.students.numbering import (
    next_access_number, next_admission_id, stream_code, month_code, is_highest_numbered
)
from backend.students.duplicates import check_for_duplicates


class NumberingTests(TestCase):
    """Test access number and admission ID generation"""

    def test_first_access_number(self):
        self.assertEqual(next_access_number('Senior 1', 'A'), 'AA01')

    def test_access_number_fills_lowest_gap(self):
        TestDataFactory.create_student(access_number='AA01')
        TestDataFactory.create_student(access_number='AA03')
        self.assertEqual(next_access_number('Senior 1', 'A'), 'AA02')

    def test_inactive_students_do_not_hold_numbers(self):
        TestDataFactory.create_student(access_number='AA01', status='left')
        self.assertEqual(next_access_number('Senior 1', 'A'), 'AA01')

    def test_unknown_class_and_stream_codes(self):
        self.assertEqual(next_access_number('Primary 7', ''), 'XN01')
        self.assertEqual(stream_code('9z'), 'N')
        self.assertEqual(stream_code('sciences'), 'S')

    def test_admission_id_counts_month(self):
        when = timezone.now().replace(month=3, day=1)
        prefix = f"{month_code(3)}{when.strftime('%y')}"
        self.assertEqual(next_admission_id('Senior 2', when), f'{prefix}B01')
        TestDataFactory.create_student(admission_id=f'{prefix}A01')
        self.assertEqual(next_admission_id('Senior 5', when), f'{prefix}X02')

    def test_is_highest_numbered(self):
        low = TestDataFactory.create_student(access_number='AA01')
        high = TestDataFactory.create_student(access_number='AA02')
        self.assertFalse(is_highest_numbered(low))
        self.assertTrue(is_highest_numbered(high))


class DuplicateCheckTests(TestCase):
    """Test the ordered duplicate checks"""

    def test_exact_match_needs_same_parent(self):
        TestDataFactory.create_student(name='Jane Doe', parent_name='Mary Doe')
        match = check_for_duplicates('jane doe', 'Senior 1', 'Mary Doe')
        self.assertEqual(match.level, 'EXACT_MATCH')

    def test_similar_match_for_different_parent(self):
        TestDataFactory.create_student(name='Jane Doe', parent_name='Mary Doe')
        match = check_for_duplicates('Jane Doe', 'Senior 1', 'Someone Else')
        self.assertEqual(match.level, 'SIMILAR_MATCH')

    def test_other_class_is_not_a_duplicate(self):
        TestDataFactory.create_student(name='Jane Doe', class_name='Senior 2')
        self.assertIsNone(check_for_duplicates('Jane Doe', 'Senior 1'))

    def test_overseer_student_reported_as_similar(self):
        """An overseer admission in the same class is already a similar match"""
        TestDataFactory.create_student(name='Jane Doe', admitted_by='overseer', access_number='None-0001')
        match = check_for_duplicates('Jane Doe', 'Senior 1', 'Someone Else')
        self.assertEqual(match.level, 'SIMILAR_MATCH')

    def test_recent_awaiting_student_is_temporal_match(self):
        TestDataFactory.create_student(name='Jane Doe', status='awaiting')
        match = check_for_duplicates('Jane Doe', 'Senior 1')
        self.assertEqual(match.level, 'TEMPORAL_MATCH')

    def test_left_student_is_not_a_duplicate(self):
        TestDataFactory.create_student(name='Jane Doe', status='left')
        self.assertIsNone(check_for_duplicates('Jane Doe', 'Senior 1'))


class StudentAdmissionTests(TestCase):
    """Test student admission through the API"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def admission(self, **overrides):
        data = {
            'name': 'John Okello',
            'age': 13,
            'class_name': 'Senior 1',
            'stream': 'A',
            'residence_type': 'Day',
            'parent': {'name': 'Grace Okello', 'phone': '0700000000'},
        }
        data.update(overrides)
        return data

    def test_admit_student(self):
        response = self.client.post('/api/v1/students/', self.admission(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['access_number'], 'AA01')
        self.assertEqual(response.data['status'], 'active')
        self.assertEqual(response.data['parent_name'], 'Grace Okello')
        self.assertEqual(response.data['sponsorship_status'], 'awaiting')
        self.assertTrue(response.data['admission_id'])

    def test_admission_numbers_increment(self):
        self.client.post('/api/v1/students/', self.admission(), format='json')
        response = self.client.post('/api/v1/students/', self.admission(name='Peter Mugisha'), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['access_number'], 'AA02')

    def test_admission_requires_name(self):
        response = self.client.post('/api/v1/students/', self.admission(name='  '), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name is required')

    def test_admission_requires_valid_age(self):
        response = self.client.post('/api/v1/students/', self.admission(age='abc'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Valid age is required')

    def test_admission_requires_stream(self):
        response = self.client.post('/api/v1/students/', self.admission(stream=''), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Stream is required')

    def test_overseer_admission_uses_placeholders(self):
        response = self.client.post(
            '/api/v1/students/', self.admission(stream='', admitted_by='overseer'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['access_number'].startswith('None-'))
        self.assertTrue(response.data['admission_id'].startswith('None-'))
        self.assertEqual(response.data['sponsorship_status'], 'pending')

    def test_exact_duplicate_blocked(self):
        TestDataFactory.create_student(name='John Okello', parent_name='Grace Okello', access_number='AA01')
        response = self.client.post('/api/v1/students/', self.admission(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['preventionLevel'], 'EXACT_MATCH')
        self.assertEqual(Student.objects.count(), 1)

    def test_dropped_access_number_reused(self):
        TestDataFactory.create_student(name='Other', access_number='AA01')
        DroppedAccessNumber.objects.create(access_number='AA07', class_name='Senior 1', stream_name='A')
        response = self.client.post('/api/v1/students/', self.admission(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['access_number'], 'AA07')
        self.assertFalse(DroppedAccessNumber.objects.filter(access_number='AA07').exists())

    def test_explicit_access_number_conflict(self):
        TestDataFactory.create_student(name='Other', access_number='AA09')
        response = self.client.post('/api/v1/students/', self.admission(access_number='AA09'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Access number already exists')

    def test_total_fees_from_billing_types(self):
        TestDataFactory.create_settings(term='Term 1', year='2025')
        TestDataFactory.create_billing_type(name='Tuition', amount=Decimal('300000.00'))
        TestDataFactory.create_billing_type(name='Boarding Fee', amount=Decimal('200000.00'))
        response = self.client.post('/api/v1/students/', self.admission(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['total_fees']), Decimal('300000.00'))

    def test_invalid_photo_rejected(self):
        photo = {'fileData': TestDataFactory.text_data_uri(), 'fileType': 'text/plain'}
        response = self.client.post('/api/v1/students/', self.admission(photo=photo), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Invalid profile photo file type', response.data['error'])

    def test_readmission_reuses_original_number(self):
        old = TestDataFactory.create_student(name='John Okello', access_number='AA05', status='re-admitted')
        response = self.client.post('/api/v1/students/', self.admission(
            isReAdmission=True, originalAccessNumber='AA05'
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['access_number'], 'AA05')
        self.assertFalse(Student.objects.filter(pk=old.pk).exists())

    def test_readmission_number_held_by_active_student(self):
        TestDataFactory.create_student(name='Other', access_number='AA05')
        response = self.client.post('/api/v1/students/', self.admission(
            isReAdmission=True, originalAccessNumber='AA05'
        ), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['access_number'], 'AA01')

    def test_old_awaiting_student_blocked_by_name_guard(self):
        """Awaiting students outside the 30 day window still block the same name and class"""
        old = TestDataFactory.create_student(name='John Okello', parent_name='Someone', status='awaiting')
        Student.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=40))
        response = self.client.post('/api/v1/students/', self.admission(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Duplicate student detected')
        self.assertEqual(response.data['existingStudent']['id'], old.id)

    def test_duplicate_check_failure_does_not_block_admission(self):
        with patch('backend.students.duplicates.check_for_duplicates', side_effect=DatabaseError('gone')):
            with self.assertLogs('backend.students.duplicates', level='ERROR'):
                response = self.client.post('/api/v1/students/', self.admission(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_admission_requires_privilege(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        self.client.authenticate_user(nurse)
        response = self.client.post('/api/v1/students/', self.admission(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StudentLifecycleTests(TestCase):
    """Test student updates, deletion, flagging and conduct notes"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.first = TestDataFactory.create_student(name='First Pupil', access_number='AA01')
        self.second = TestDataFactory.create_student(name='Second Pupil', access_number='AA02')

    def test_list_and_filter(self):
        TestDataFactory.create_student(name='Senior Two Pupil', class_name='Senior 2', access_number='BA01')
        response = self.client.get('/api/v1/students/', {'class_name': 'senior 2'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/students/?search=AA02')
        self.assertEqual([s['id'] for s in response.data], [self.second.id])

    def test_parent_sees_only_assigned_students(self):
        parent = TestDataFactory.create_user(role='PARENT', student_ids=[self.first.id])
        self.client.authenticate_user(parent)
        response = self.client.get('/api/v1/students/')
        self.assertEqual([s['id'] for s in response.data], [self.first.id])
        response = self.client.get(f'/api/v1/students/{self.second.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_student(self):
        response = self.client.patch(f'/api/v1/students/{self.first.id}/', {'village': 'Gulu'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.first.refresh_from_db()
        self.assertEqual(self.first.village, 'Gulu')

    def test_delete_lower_number_is_dropped(self):
        response = self.client.delete(f'/api/v1/students/{self.first.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['isHighestNumbered'])
        self.assertTrue(DroppedAccessNumber.objects.filter(access_number='AA01').exists())

    def test_delete_highest_number_not_dropped(self):
        response = self.client.delete(f'/api/v1/students/{self.second.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['isHighestNumbered'])
        self.assertFalse(DroppedAccessNumber.objects.exists())

    def test_overseer_student_cannot_be_deleted(self):
        pupil = TestDataFactory.create_student(name='Pupil', access_number='None-1-abc', admitted_by='overseer')
        response = self.client.delete(f'/api/v1/students/{pupil.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Student.objects.filter(pk=pupil.id).exists())

    def test_flag_student(self):
        response = self.client.patch(
            f'/api/v1/students/{self.first.id}/flag/', {'status': 'expelled', 'comment': 'Conduct'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.first.refresh_from_db()
        self.assertEqual(self.first.status, 'expelled')
        self.assertTrue(DroppedAccessNumber.objects.filter(access_number='AA01').exists())

    def test_flag_readmitted_keeps_number(self):
        response = self.client.patch(f'/api/v1/students/{self.first.id}/flag/', {'status': 're-admitted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['accessNumber'], 'AA01')
        self.assertFalse(DroppedAccessNumber.objects.exists())

    def test_flag_invalid_status(self):
        response = self.client.patch(f'/api/v1/students/{self.first.id}/flag/', {'status': 'vanished'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_add_conduct_note(self):
        note = {'content': 'Helped clean the library', 'type': 'positive', 'author': 'Mr. Ouma'}
        response = self.client.post(f'/api/v1/students/{self.first.id}/conduct-notes/', note, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.first.refresh_from_db()
        self.assertEqual(len(self.first.conduct_notes), 1)
        self.assertEqual(self.first.conduct_notes[0]['type'], 'positive')

    def test_conduct_note_invalid_type(self):
        note = {'content': 'Something', 'type': 'gossip', 'author': 'Mr. Ouma'}
        response = self.client.post(f'/api/v1/students/{self.first.id}/conduct-notes/', note, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_approve_overseer_admission(self):
        pupil = TestDataFactory.create_student(name='Pupil', access_number='None-1-abc', admitted_by='overseer')
        response = self.client.post(
            f'/api/v1/students/{pupil.id}/approve-overseer-admission/', {'accessNumber': 'AA05'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        pupil.refresh_from_db()
        self.assertEqual(pupil.access_number, 'AA05')
        self.assertEqual(pupil.sponsorship_status, 'approved')

    def test_approve_overseer_conflicting_number(self):
        pupil = TestDataFactory.create_student(name='Pupil', access_number='None-1-abc', admitted_by='overseer')
        response = self.client.post(
            f'/api/v1/students/{pupil.id}/approve-overseer-admission/', {'accessNumber': 'AA01'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_fee_balance(self):
        self.first.total_fees = Decimal('500000.00')
        self.first.fees_paid = Decimal('200000.00')
        self.first.save()
        response = self.client.get(f'/api/v1/students/{self.first.id}/fee-balance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['balance'], 300000.0)
        self.assertFalse(response.data['isFullyPaid'])


class DroppedAccessNumberTests(TestCase):
    """Test dropped access number endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        DroppedAccessNumber.objects.create(access_number='AA03', class_name='Senior 1', stream_name='A')
        DroppedAccessNumber.objects.create(access_number='BB02', class_name='Senior 2', stream_name='B')

    def test_list(self):
        response = self.client.get('/api/v1/students/dropped-access-numbers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_by_stream(self):
        response = self.client.get('/api/v1/students/dropped-access-numbers/Senior%201/A/')
        self.assertEqual(response.data, ['AA03'])

    def test_delete(self):
        response = self.client.delete('/api/v1/students/dropped-access-numbers/AA03/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete('/api/v1/students/dropped-access-numbers/AA03/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ClassCatalogTests(TestCase):
    """Test the static class catalog"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_class_list(self):
        response = self.client.get('/api/v1/classes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 6)

    def test_missing_class(self):
        response = self.client.get('/api/v1/classes/99/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class DuplicateCommandTests(TestCase):
    """Test the duplicate cleanup command"""

    def test_dry_run_keeps_everything(self):
        TestDataFactory.create_student(name='Twin', access_number='AA01', parent_name='P')
        TestDataFactory.create_student(name='twin', access_number='AA02', parent_name='P')
        out = StringIO()
        call_command('cleanup_duplicates', stdout=out)
        self.assertEqual(Student.objects.count(), 2)
        self.assertIn('Duplicates found: 1', out.getvalue())

    def test_apply_keeps_oldest(self):
        oldest = TestDataFactory.create_student(name='Twin', access_number='AA01', parent_name='P')
        TestDataFactory.create_student(name='twin', access_number='AA02', parent_name='P')
        call_command('cleanup_duplicates', '--apply', stdout=StringIO())
        self.assertEqual(list(Student.objects.values_list('id', flat=True)), [oldest.id])

    def test_check_duplicates_report(self):
        TestDataFactory.create_student(name='Twin ', access_number='AA01', age=12)
        TestDataFactory.create_student(name='twin', access_number='AA02', age=12)
        TestDataFactory.create_student(name='Twin', access_number='AA03', age=14)
        out = StringIO()
        call_command('check_duplicates', stdout=out)
        self.assertIn('twin|Senior 1|12 (2 records)', out.getvalue())
        self.assertIn('Found 1 duplicate groups', out.getvalue())
        self.assertEqual(Student.objects.count(), 3)
