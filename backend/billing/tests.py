"""
Comprehensive test suite for Billing module
Tests: Billing types, fee structures, residence filtering, payments, financial records and currency conversion
"""
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.billing.currency import convert, UnknownCurrency
from backend.billing.fees import (
    filter_fee_items_by_residence, normalize_residence, resolve_class_fee_structure, needs_sync
)
from backend.billing.models import BillingType, ExchangeRate, FeeStructure, FinancialRecord


class FeeResolutionTests(TestCase):
    """Test fee structure helpers"""

    def setUp(self):
        TestDataFactory.create_settings(term='Term 2', year='2025')

    def test_normalize_residence(self):
        self.assertEqual(normalize_residence('boarding student'), 'Boarding')
        self.assertEqual(normalize_residence('DAY'), 'Day')
        self.assertIsNone(normalize_residence(''))

    def test_residence_filtering(self):
        items = [
            {'name': 'Tuition', 'amount': 300000},
            {'name': 'Boarding Fee', 'amount': 200000},
            {'name': 'Lunch', 'amount': 50000},
        ]
        kept, total = filter_fee_items_by_residence(items, 'Boarding')
        self.assertEqual([i['name'] for i in kept], ['Tuition', 'Boarding Fee'])
        self.assertEqual(total, Decimal('500000'))
        kept, total = filter_fee_items_by_residence(items, None)
        self.assertEqual(total, Decimal('350000'))

    def test_resolve_uses_current_term_and_dedupes(self):
        TestDataFactory.create_billing_type(name='Tuition', amount=Decimal('100000'), term='term 2')
        TestDataFactory.create_billing_type(name='tuition', amount=Decimal('150000'), term='Term 2')
        TestDataFactory.create_billing_type(name='Tuition', amount=Decimal('999999'), term='Term 1')
        structure = resolve_class_fee_structure('Senior 1')
        self.assertEqual(len(structure['items']), 1)
        self.assertEqual(structure['total'], Decimal('150000'))
        self.assertEqual(structure['currentTerm'], 'Term 2')

    def test_needs_sync(self):
        billing = [TestDataFactory.create_billing_type(name='Tuition', amount=Decimal('100'))]
        self.assertTrue(needs_sync([], billing))
        self.assertFalse(needs_sync([], []))
        mirror = FeeStructure(class_name='Senior 1', fee_name='Tuition', amount=Decimal('100.00'))
        self.assertFalse(needs_sync([mirror], billing))


class BillingTypeTests(TestCase):
    """Test billing type and fee structure endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_billing_type(self):
        data = {'name': 'Tuition', 'amount': '250000.00', 'class_name': 'Senior 1', 'term': 'Term 1', 'year': '2025'}
        response = self.client.post('/api/v1/settings/billing-types/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(BillingType.objects.count(), 1)

    def test_create_billing_type_requires_privilege(self):
        teacher = TestDataFactory.create_user(role='NURSE')
        self.client.authenticate_user(teacher)
        data = {'name': 'Tuition', 'amount': '250000.00', 'class_name': 'Senior 1'}
        response = self.client.post('/api/v1/settings/billing-types/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_and_delete_billing_type(self):
        billing_type = TestDataFactory.create_billing_type()
        response = self.client.put(
            f'/api/v1/settings/billing-types/{billing_type.id}/', {'amount': '120000.00'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        billing_type.refresh_from_db()
        self.assertEqual(billing_type.amount, Decimal('120000.00'))
        response = self.client.delete(f'/api/v1/settings/billing-types/{billing_type.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_fee_structure_for_class_syncs(self):
        TestDataFactory.create_billing_type(name='Tuition', amount=Decimal('100000'))
        TestDataFactory.create_billing_type(name='Development', amount=Decimal('20000'))
        response = self.client.get('/api/v1/settings/fee-structures/Senior%201/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['synced'])
        self.assertEqual(response.data['feeCount'], 2)
        self.assertEqual(response.data['totalFees'], 120000.0)
        response = self.client.get('/api/v1/settings/fee-structures/Senior%201/')
        self.assertFalse(response.data['synced'])

    def test_sync_and_list_fee_structures(self):
        TestDataFactory.create_billing_type(class_name='Senior 1', name='Tuition', amount=Decimal('100000'))
        TestDataFactory.create_billing_type(class_name='Senior 2', name='Tuition', amount=Decimal('110000'))
        response = self.client.post('/api/v1/settings/fee-structures/sync-from-billing/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['classes'], 2)
        response = self.client.get('/api/v1/settings/fee-structures/')
        self.assertEqual(response.data['totalClasses'], 2)
        self.assertEqual(response.data['classTotals']['Senior 2'], 110000.0)

    def test_purge_and_rebuild_admin_only(self):
        TestDataFactory.create_billing_type()
        accountant = TestDataFactory.create_user(role='ACCOUNTANT')
        self.client.authenticate_user(accountant)
        response = self.client.post('/api/v1/settings/fee-structures/admin/purge-and-rebuild/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.authenticate_user(self.user)
        response = self.client.post('/api/v1/settings/fee-structures/admin/purge-and-rebuild/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(FeeStructure.objects.count(), 1)


class PaymentTests(TestCase):
    """Test payment processing and payment summaries"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_settings(term='Term 1', year='2025')
        TestDataFactory.create_billing_type(name='Tuition', amount=Decimal('300000'))
        TestDataFactory.create_billing_type(name='Lunch', amount=Decimal('50000'))
        self.student = TestDataFactory.create_student(access_number='AA01', residence_type='Day')

    def test_process_payment(self):
        data = {'studentId': self.student.id, 'amount': 100000, 'billingType': 'Tuition', 'paymentMethod': 'cash'}
        response = self.client.post('/api/v1/payments/process/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = FinancialRecord.objects.get()
        self.assertEqual(record.term, 'Term 1')
        self.assertEqual(record.year, '2025')
        self.assertTrue(record.receipt_number.startswith('RC'))
        self.student.refresh_from_db()
        self.assertEqual(self.student.fees_paid, Decimal('100000.00'))

    def test_process_payment_by_access_number(self):
        data = {'studentId': 'AA01', 'amount': '5000'}
        response = self.client.post('/api/v1/payments/process/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['record']['student_id'], str(self.student.id))

    def test_process_payment_unknown_student(self):
        response = self.client.post('/api/v1/payments/process/', {'studentId': 'ZZ99', 'amount': 10}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_process_payment_invalid_amount(self):
        for amount in (0, -5, 'abc', 'NaN'):
            response = self.client.post(
                '/api/v1/payments/process/', {'studentId': self.student.id, 'amount': amount}, format='json'
            )
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_payment_requires_privilege(self):
        nurse = TestDataFactory.create_user(role='NURSE')
        self.client.authenticate_user(nurse)
        response = self.client.post(
            '/api/v1/payments/process/', {'studentId': self.student.id, 'amount': 10}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_payment_summary_breakdown(self):
        self.client.post(
            '/api/v1/payments/process/',
            {'studentId': self.student.id, 'amount': 100000, 'billingType': 'Tuition'},
            format='json'
        )
        TestDataFactory.create_financial_record(
            student_id=self.student.id, amount=Decimal('7000'), billing_type='Tuition', term='Term 3'
        )
        response = self.client.get(f'/api/v1/payments/summary/{self.student.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalPaid'], 100000.0)
        self.assertEqual(response.data['totalFeesRequired'], 350000.0)
        self.assertEqual(response.data['balance'], 250000.0)
        tuition = [item for item in response.data['paymentBreakdown'] if item['feeName'] == 'Tuition'][0]
        self.assertEqual(tuition['remaining'], 200000.0)

    def test_student_payment_list(self):
        TestDataFactory.create_financial_record(student_id=self.student.id)
        TestDataFactory.create_financial_record(student_id=self.student.id, type='fee')
        response = self.client.get(f'/api/v1/payments/student/{self.student.id}/')
        self.assertEqual(len(response.data), 1)

    def test_clear_payments_admin_only(self):
        TestDataFactory.create_financial_record(student_id=self.student.id)
        response = self.client.delete('/api/v1/payments/admin/clear-payments/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(FinancialRecord.objects.count(), 0)


class FinancialRecordTests(TestCase):
    """Test financial record CRUD and summaries"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='ADMIN')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_record(self):
        data = {'student_id': '12', 'type': 'fee', 'amount': '40000.00', 'description': 'Uniform'}
        response = self.client.post('/api/v1/financial-records/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNotNone(FinancialRecord.objects.get().date)

    def test_summary(self):
        TestDataFactory.create_financial_record(student_id='12', type='fee', amount=Decimal('100000'), status='pending')
        TestDataFactory.create_financial_record(student_id='12', type='payment', amount=Decimal('30000'))
        response = self.client.get('/api/v1/financial-records/summary/12/')
        self.assertEqual(response.data['totalFees'], 100000.0)
        self.assertEqual(response.data['totalPaid'], 30000.0)
        self.assertEqual(response.data['balance'], 70000.0)
        self.assertEqual(response.data['totalPending'], 100000.0)

    def test_delete_record(self):
        record = TestDataFactory.create_financial_record()
        response = self.client.delete(f'/api/v1/financial-records/{record.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class CurrencyTests(TestCase):
    """Test currency listing and conversion"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_convert_helper(self):
        converted, rate, ugx = convert(Decimal('100'), 'USD', 'UGX')
        self.assertEqual(converted, Decimal('370000.0'))
        self.assertEqual(rate, Decimal('3700'))
        with self.assertRaises(UnknownCurrency):
            convert(Decimal('1'), 'USD', 'XYZ')

    def test_convert_endpoint(self):
        data = {'amount': 8000, 'fromCurrency': 'EUR', 'toCurrency': 'USD'}
        response = self.client.post('/api/v1/currency/convert/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['ugxEquivalent'], 32000000.0)

    def test_convert_errors(self):
        response = self.client.post('/api/v1/currency/convert/', {'amount': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        data = {'amount': 1, 'fromCurrency': 'USD', 'toCurrency': 'ABC'}
        response = self.client.post('/api/v1/currency/convert/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_currency_list(self):
        response = self.client.get('/api/v1/currency/currencies/')
        self.assertIn('UGX', [c['code'] for c in response.data])

    def test_exchange_rate_must_be_positive(self):
        data = {'from_currency': 'USD', 'to_currency': 'UGX', 'rate': '0'}
        response = self.client.post('/api/v1/currency/exchange-rates/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class BillingCommandTests(TestCase):
    """Test billing management commands"""

    def test_update_billing_terms(self):
        TestDataFactory.create_billing_type(term='Term 1', year='2025')
        TestDataFactory.create_billing_type(class_name='Senior 2', term='Term 1', year='2024')
        call_command('update_billing_terms', '--year', '2025', '--term', 'Term 3', stdout=StringIO())
        self.assertEqual(BillingType.objects.get(year='2025').term, 'Term 3')
        self.assertEqual(BillingType.objects.get(year='2024').term, 'Term 1')


    def test_seed_exchange_rates_skips_existing(self):
        ExchangeRate.objects.create(from_currency='USD', to_currency='UGX', rate=Decimal('3800'))
        call_command('seed_exchange_rates', stdout=StringIO())
        self.assertEqual(ExchangeRate.objects.filter(to_currency='UGX').count(), 6)
        self.assertEqual(ExchangeRate.objects.get(from_currency='USD').rate, Decimal('3800'))
        self.assertFalse(ExchangeRate.objects.filter(from_currency='UGX').exists())
