"""
Comprehensive test suite for Inventory module
Tests: Item CRUD, filtering, stock adjustments and out-of-stock status
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import InventoryItem, InventoryAdjustment


class InventoryItemTests(TestCase):
    """Test inventory item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='OPM')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_item(self):
        data = {'name': ' Desks ', 'category': 'Furniture', 'quantity': 40, 'location': 'Block A'}
        response = self.client.post('/api/v1/inventory/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item = InventoryItem.objects.get()
        self.assertEqual(item.name, 'Desks')
        self.assertEqual(item.unit, 'pcs')
        self.assertEqual(item.status, 'available')

    def test_create_requires_name(self):
        response = self.client.post('/api/v1/inventory/', {'name': '  ', 'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Name is required')

    def test_negative_quantity_rejected(self):
        response = self.client.post('/api/v1/inventory/', {'name': 'Chalk', 'quantity': -3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_teacher_cannot_add(self):
        teacher = TestDataFactory.create_user(role='TEACHER')
        self.client.authenticate_user(teacher)
        response = self.client.post('/api/v1/inventory/', {'name': 'Chalk'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_filters(self):
        TestDataFactory.create_inventory_item(name='Desk', category='Furniture', location='Block A')
        TestDataFactory.create_inventory_item(name='Laptop', category='ICT', location='Lab', status='in_use')
        response = self.client.get('/api/v1/inventory/', {'category': 'furniture'})
        self.assertEqual([i['name'] for i in response.data], ['Desk'])
        response = self.client.get('/api/v1/inventory/', {'status': 'in_use'})
        self.assertEqual([i['name'] for i in response.data], ['Laptop'])
        response = self.client.get('/api/v1/inventory/', {'search': 'lab'})
        self.assertEqual([i['name'] for i in response.data], ['Laptop'])

    def test_update_and_delete(self):
        item = TestDataFactory.create_inventory_item()
        response = self.client.patch(f'/api/v1/inventory/{item.id}/', {'status': 'under_repair'}, format='json')
        self.assertEqual(response.data['status'], 'under_repair')
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class InventoryAdjustmentTests(TestCase):
    """Test stock adjustments"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='OPM', name='Ops Manager')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_inventory_item(name='Chairs', quantity=5)
        self.url = f'/api/v1/inventory/{self.item.id}/adjustments/'

    def test_stock_in(self):
        response = self.client.post(self.url, {'adjustment_type': 'in', 'quantity': 3, 'reason': 'Donation'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['item']['quantity'], 8)
        self.assertEqual(response.data['adjustment']['created_by'], 'Ops Manager')

    def test_stock_out_to_zero_marks_out_of_stock(self):
        response = self.client.post(self.url, {'adjustment_type': 'out', 'quantity': 5}, format='json')
        self.assertEqual(response.data['item']['status'], 'out_of_stock')
        response = self.client.post(self.url, {'adjustment_type': 'in', 'quantity': 2}, format='json')
        self.assertEqual(response.data['item']['status'], 'available')

    def test_cannot_remove_more_than_available(self):
        response = self.client.post(self.url, {'adjustment_type': 'out', 'quantity': 6}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Only 5 pcs of Chairs available')
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, 5)
        self.assertFalse(InventoryAdjustment.objects.exists())

    def test_quantity_must_be_positive(self):
        response = self.client.post(self.url, {'adjustment_type': 'in', 'quantity': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_repair_status_kept_at_zero(self):
        self.item.status = 'under_repair'
        self.item.save()
        response = self.client.post(self.url, {'adjustment_type': 'out', 'quantity': 5}, format='json')
        self.assertEqual(response.data['item']['status'], 'under_repair')

    def test_list_adjustments(self):
        self.client.post(self.url, {'adjustment_type': 'in', 'quantity': 1}, format='json')
        response = self.client.get(self.url)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['item_name'], 'Chairs')
