"""
Comprehensive test suite for Messaging module
Tests: Role messaging matrix, sending, conversation lists, unread counts and read state
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import UserPrivilege
from backend.messaging.models import Message
from backend.messaging.privileges import (
    can_user_message_role, get_messagable_roles, can_send_message_to, get_allowed_message_types,
    get_max_recipients, requires_approval, validate_message_permissions, with_default_messaging_privileges
)


class MessagingPrivilegeTests(TestCase):
    """Test the messaging permission helpers"""

    def test_everyone_can_message_admin(self):
        self.assertTrue(can_user_message_role([], 'ADMIN'))
        self.assertFalse(can_user_message_role([], 'PARENT'))
        self.assertTrue(can_user_message_role(['message_parent'], 'PARENT'))
        self.assertFalse(can_user_message_role(['message_parent'], 'CFO'))

    def test_defaults_not_duplicated(self):
        self.assertEqual(with_default_messaging_privileges(['message_admin', 'message_nurse']),
                         ['message_admin', 'message_nurse'])
        self.assertEqual(get_messagable_roles(['message_nurse']), ['ADMIN', 'NURSE'])

    def test_role_matrix(self):
        self.assertTrue(can_send_message_to('SPONSOR', 'SPONSORSHIPS_OVERSEER'))
        self.assertFalse(can_send_message_to('SPONSOR', 'PARENT'))
        self.assertFalse(can_send_message_to('CFO', 'ADMIN'))

    def test_role_limits(self):
        self.assertEqual(get_allowed_message_types('ADMIN'), ['general'])
        self.assertEqual(get_max_recipients('SPONSOR'), 3)
        self.assertEqual(get_max_recipients('CFO'), 1)
        self.assertTrue(requires_approval('SPONSOR'))
        self.assertFalse(requires_approval('NURSE'))

    def test_validate_checks_in_order(self):
        allowed, reason = validate_message_permissions('PARENT', 'SPONSOR', 'general')
        self.assertFalse(allowed)
        self.assertIn('not authorized to send messages to SPONSOR', reason)

        allowed, reason = validate_message_permissions('PARENT', 'NURSE', 'payment')
        self.assertFalse(allowed)
        self.assertIn('payment messages', reason)

        allowed, reason = validate_message_permissions('PARENT', 'NURSE', 'clinic', recipient_count=6)
        self.assertFalse(allowed)
        self.assertIn('5 recipients', reason)

        self.assertEqual(validate_message_permissions('PARENT', 'NURSE', 'clinic'), (True, None))


class MessageApiTests(TestCase):
    """Test message endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role='ADMIN', name='Head Teacher')
        self.parent = TestDataFactory.create_user(role='PARENT', name='Parent One')
        self.sponsor = TestDataFactory.create_user(role='SPONSOR', name='Sponsor One')
        self.nurse = TestDataFactory.create_user(role='NURSE', name='Nurse One')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.parent)

    def send(self, sender, receiver, **extra):
        data = {'from': sender.id, 'to': receiver.id if receiver else None, 'subject': 'Hi', 'content': 'Hello'}
        data.update(extra)
        return self.client.post('/api/v1/messages/', data, format='json')

    def test_send_message(self):
        response = self.send(self.parent, self.nurse, type='CLINIC', priority='high')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        message = Message.objects.get()
        self.assertEqual(message.title, 'Hi')
        self.assertEqual(message.priority, 'high')
        self.assertEqual(response.data['sender_name'], 'Parent One')

    def test_required_fields(self):
        response = self.client.post('/api/v1/messages/', {'from': self.parent.id, 'content': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Sender, subject and content are required')

    def test_non_numeric_ids(self):
        response = self.client.post('/api/v1/messages/',
                                    {'from': 'abc', 'subject': 's', 'content': 'c'}, format='json')
        self.assertEqual(response.data['error'], 'Invalid sender ID format. Expected numeric ID.')
        response = self.client.post('/api/v1/messages/',
                                    {'from': self.parent.id, 'to': 'x1', 'subject': 's', 'content': 'c'},
                                    format='json')
        self.assertEqual(response.data['error'], 'Invalid receiver ID format. Expected numeric ID.')

    def test_cannot_send_as_someone_else(self):
        response = self.send(self.nurse, self.parent)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_may_send_on_behalf(self):
        self.client.authenticate_user(self.admin)
        response = self.send(self.nurse, self.parent)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_unknown_receiver(self):
        response = self.client.post('/api/v1/messages/',
                                    {'from': self.parent.id, 'to': 99999, 'subject': 's', 'content': 'c'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_matrix_blocks_role(self):
        response = self.send(self.parent, self.sponsor)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Message.objects.exists())

    def test_matrix_blocks_type(self):
        response = self.send(self.parent, self.nurse, type='PAYMENT')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_roles_outside_matrix_unrestricted(self):
        """Roles without matrix rules are not blocked"""
        accountant = TestDataFactory.create_user(role='ACCOUNTANT')
        self.client.authenticate_user(accountant)
        response = self.send(accountant, self.sponsor, type='PAYMENT')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_broadcast_without_receiver(self):
        response = self.send(self.parent, None)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(Message.objects.get().receiver)

    def test_list_scoped_for_non_admin(self):
        TestDataFactory.create_message(self.parent, self.nurse)
        TestDataFactory.create_message(self.admin, self.sponsor)
        response = self.client.get('/api/v1/messages/')
        self.assertEqual(len(response.data), 1)
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/messages/')
        self.assertEqual(len(response.data), 2)

    def test_user_conversation(self):
        TestDataFactory.create_message(self.parent, self.nurse, title='First')
        TestDataFactory.create_message(self.nurse, self.parent, title='Reply')
        TestDataFactory.create_message(self.admin, self.sponsor)
        response = self.client.get(f'/api/v1/messages/user/{self.parent.id}/')
        self.assertEqual(len(response.data), 2)
        self.assertEqual({item['subject'] for item in response.data}, {'First', 'Reply'})
        self.assertIn('fromRole', response.data[0])

    def test_unread_count_and_mark_all_read(self):
        TestDataFactory.create_message(self.nurse, self.parent)
        TestDataFactory.create_message(self.admin, self.parent)
        TestDataFactory.create_message(self.parent, self.nurse)
        response = self.client.get(f'/api/v1/messages/unread/count/{self.parent.id}/')
        self.assertEqual(response.data['count'], 2)
        response = self.client.get('/api/v1/messages/unread/count/')
        self.assertEqual(response.data['count'], 2)
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/messages/unread/count/')
        self.assertEqual(response.data['count'], 3)
        self.client.authenticate_user(self.parent)
        response = self.client.put(f'/api/v1/messages/read/all/{self.parent.id}/')
        self.assertEqual(response.data['updated'], 2)

    def test_mark_read_and_pin(self):
        message = TestDataFactory.create_message(self.nurse, self.parent)
        response = self.client.patch(f'/api/v1/messages/{message.id}/', {'read': True, 'isPinned': True},
                                     format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        message.refresh_from_db()
        self.assertTrue(message.read)
        self.assertTrue(message.is_pinned)

        # only a literal true marks read
        self.client.put(f'/api/v1/messages/{message.id}/', {'read': 'yes'}, format='json')
        message.refresh_from_db()
        self.assertFalse(message.read)

    def test_delete(self):
        message = TestDataFactory.create_message(self.nurse, self.parent)
        response = self.client.delete(f'/api/v1/messages/{message.id}/')
        self.assertEqual(response.data['message'], 'Message deleted successfully')
        self.assertFalse(Message.objects.exists())

    def test_other_users_messages_are_private(self):
        message = TestDataFactory.create_message(self.nurse, self.admin)
        response = self.client.get(f'/api/v1/messages/user/{self.nurse.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get(f'/api/v1/messages/unread/count/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.put(f'/api/v1/messages/read/all/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.put(f'/api/v1/messages/{message.id}/', {'read': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(f'/api/v1/messages/{message.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        message.refresh_from_db()
        self.assertFalse(message.read)

        self.client.authenticate_user(self.admin)
        response = self.client.get(f'/api/v1/messages/user/{self.nurse.id}/')
        self.assertEqual(len(response.data), 1)

    def test_eligible_recipients(self):
        response = self.client.get('/api/v1/messages/eligible-recipients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('NURSE', response.data['roles'])
        self.assertEqual(response.data['maxRecipients'], 5)
        names = [user['name'] for user in response.data['users']]
        self.assertIn('Nurse One', names)
        self.assertIn('Head Teacher', names)
        self.assertNotIn('Sponsor One', names)
        self.assertNotIn('Parent One', names)

    def test_eligible_recipients_outside_matrix_use_grants(self):
        accountant = TestDataFactory.create_user(role='ACCOUNTANT')
        self.client.authenticate_user(accountant)
        response = self.client.get('/api/v1/messages/eligible-recipients/')
        self.assertEqual(response.data['roles'], ['ADMIN'])
        UserPrivilege.objects.create(user=accountant, privilege='message_sponsor')
        response = self.client.get('/api/v1/messages/eligible-recipients/')
        self.assertEqual(response.data['roles'], ['ADMIN', 'SPONSOR'])
        self.assertIn('Sponsor One', [user['name'] for user in response.data['users']])
