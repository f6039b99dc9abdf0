"""
Comprehensive test suite for Sponsorships module
Tests: Pledges, validation, the review pipeline and student sponsorship status
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog
from backend.sponsorships.models import Sponsorship


class SponsorshipPledgeTests(TestCase):
    """Test pledging sponsorships"""

    def setUp(self):
        self.sponsor = TestDataFactory.create_user(role='SPONSOR')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.sponsor)
        self.student = TestDataFactory.create_student()

    def test_pledge(self):
        data = {
            'studentId': self.student.id,
            'sponsorName': 'Friends of Kampala',
            'sponsorCountry': 'Canada',
            'amount': '45000',
            'duration': 6,
            'sponsorshipStartDate': '2025-01-01',
        }
        response = self.client.post('/api/v1/sponsorships/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sponsorship = Sponsorship.objects.get()
        self.assertEqual(sponsorship.status, 'pending')
        self.assertEqual(sponsorship.amount, Decimal('45000.00'))
        self.assertEqual(sponsorship.end_date - sponsorship.start_date, timedelta(days=180))
        self.student.refresh_from_db()
        self.assertEqual(self.student.sponsorship_status, 'under-sponsorship-review')

    def test_default_duration_and_country(self):
        data = {'studentId': str(self.student.id), 'sponsorName': 'Jane', 'amount': 1000}
        response = self.client.post('/api/v1/sponsorships/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        sponsorship = Sponsorship.objects.get()
        self.assertEqual(sponsorship.sponsor_country, 'Uganda')
        self.assertEqual(sponsorship.end_date - sponsorship.start_date, timedelta(days=360))

    def test_missing_fields(self):
        response = self.client.post('/api/v1/sponsorships/', {'studentId': self.student.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Missing required fields')

    def test_invalid_values(self):
        for data in (
            {'studentId': 'abc', 'sponsorName': 'X', 'amount': 10},
            {'studentId': self.student.id, 'sponsorName': 'X', 'amount': 'lots'},
            {'studentId': self.student.id, 'sponsorName': 'X', 'amount': -10},
            {'studentId': self.student.id, 'sponsorName': 'X', 'amount': 10, 'sponsorshipStartDate': 'someday'},
        ):
            response = self.client.post('/api/v1/sponsorships/', data, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Sponsorship.objects.exists())

    def test_unknown_student(self):
        data = {'studentId': 99999, 'sponsorName': 'X', 'amount': 10}
        response = self.client.post('/api/v1/sponsorships/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_filter_by_status(self):
        TestDataFactory.create_sponsorship(student=self.student, status='pending')
        TestDataFactory.create_sponsorship(student=self.student, status='sponsored')
        response = self.client.get('/api/v1/sponsorships/', {'status': 'sponsored'})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['student_name'], self.student.name)


class SponsorshipPipelineTests(TestCase):
    """Test the review pipeline"""

    def setUp(self):
        self.coordinator = TestDataFactory.create_user(role='SPONSORSHIP_COORDINATOR')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.coordinator)
        self.student = TestDataFactory.create_student(sponsorship_status='under-sponsorship-review')
        self.sponsorship = TestDataFactory.create_sponsorship(student=self.student)

    def post_action(self, action, pk=None):
        return self.client.post(f'/api/v1/sponsorships/{pk or self.sponsorship.id}/{action}/')

    def test_approve_then_sponsor(self):
        response = self.post_action('approve')
        self.assertEqual(response.data['status'], 'coordinator-approved')
        self.student.refresh_from_db()
        self.assertEqual(self.student.sponsorship_status, 'under-sponsorship-review')

        response = self.post_action('approve-sponsored')
        self.assertEqual(response.data['status'], 'sponsored')
        self.student.refresh_from_db()
        self.assertEqual(self.student.sponsorship_status, 'sponsored')
        self.assertEqual(AuditLog.objects.filter(action='sponsorship_status').count(), 2)

    def test_reject_returns_student_to_pool(self):
        response = self.post_action('reject')
        self.assertEqual(response.data['status'], 'rejected')
        self.student.refresh_from_db()
        self.assertEqual(self.student.sponsorship_status, 'available-for-sponsors')

    def test_complete(self):
        response = self.post_action('complete')
        self.assertEqual(response.data['status'], 'completed')

    def test_unknown_sponsorship(self):
        response = self.post_action('approve', pk=99999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Sponsorship not found', 'id': 99999})

    def test_sponsor_cannot_approve(self):
        sponsor = TestDataFactory.create_user(role='SPONSOR')
        self.client.authenticate_user(sponsor)
        response = self.post_action('approve')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.sponsorship.refresh_from_db()
        self.assertEqual(self.sponsorship.status, 'pending')

    def test_update_and_delete(self):
        response = self.client.patch(f'/api/v1/sponsorships/{self.sponsorship.id}/',
                                     {'amount': '0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(f'/api/v1/sponsorships/{self.sponsorship.id}/',
                                     {'description': 'School fees'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.delete(f'/api/v1/sponsorships/{self.sponsorship.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_student_availability(self):
        response = self.client.post(f'/api/v1/sponsorships/student/{self.student.id}/make-available/')
        self.assertEqual(response.data['sponsorship_status'], 'available-for-sponsors')
        response = self.client.post(f'/api/v1/sponsorships/student/{self.student.id}/make-eligible/')
        self.assertEqual(response.data['sponsorship_status'], 'eligible')
        self.student.refresh_from_db()
        self.assertEqual(self.student.sponsorship_status, 'eligible')
