"""
Messaging permission matrix

MESSAGING_PRIVILEGES are per-user grants to message a role (everyone has
message_admin). MESSAGE_PRIVILEGES is the per-role matrix of who may message
whom, with which message types and how many recipients at once.
"""

MESSAGING_PRIVILEGES = [
    {'id': 'message_admin', 'name': 'Message Admin', 'target_role': 'ADMIN', 'is_default': True,
     'description': 'Send messages to administrators'},
    {'id': 'message_teacher', 'name': 'Message Teacher', 'target_role': 'USER', 'is_default': False,
     'description': 'Send messages to teachers'},
    {'id': 'message_super_teacher', 'name': 'Message Super Teacher', 'target_role': 'SUPER_TEACHER',
     'is_default': False, 'description': 'Send messages to super teachers'},
    {'id': 'message_parent', 'name': 'Message Parent', 'target_role': 'PARENT', 'is_default': False,
     'description': 'Send messages to parents'},
    {'id': 'message_nurse', 'name': 'Message Nurse', 'target_role': 'NURSE', 'is_default': False,
     'description': 'Send messages to school nurses'},
    {'id': 'message_sponsor', 'name': 'Message Sponsor', 'target_role': 'SPONSOR', 'is_default': False,
     'description': 'Send messages to sponsors'},
    {'id': 'message_sponsorships_overseer', 'name': 'Message Sponsorships Overseer',
     'target_role': 'SPONSORSHIPS_OVERSEER', 'is_default': False,
     'description': 'Send messages to sponsorships overseer'},
    {'id': 'message_sponsorship_coordinator', 'name': 'Message Sponsorship Coordinator',
     'target_role': 'SPONSORSHIP_COORDINATOR', 'is_default': False,
     'description': 'Send messages to sponsorship coordinators'},
    {'id': 'message_superuser', 'name': 'Message Super User', 'target_role': 'SUPERUSER', 'is_default': False,
     'description': 'Send messages to super users'},
]

MESSAGE_PRIVILEGES = {
    'ADMIN': {
        'can_send_to': ['USER', 'TEACHER', 'PARENT', 'NURSE', 'SUPER_TEACHER', 'SPONSOR',
                        'SPONSORSHIPS_OVERSEER', 'SPONSORSHIP_COORDINATOR', 'SUPERUSER'],
        'max_recipients': 1000,
    },
    'SUPERUSER': {
        'can_send_to': ['USER', 'TEACHER', 'PARENT', 'NURSE', 'SUPER_TEACHER', 'ADMIN', 'SPONSOR',
                        'SPONSORSHIPS_OVERSEER', 'SPONSORSHIP_COORDINATOR'],
        'max_recipients': 1000,
    },
    'SUPER_TEACHER': {
        'can_send_to': ['USER', 'TEACHER', 'PARENT', 'NURSE', 'ADMIN'],
        'message_types': ['general', 'clinic', 'attendance', 'payment'],
    },
    'USER': {
        'can_send_to': ['ADMIN', 'PARENT', 'NURSE', 'SUPER_TEACHER'],
        'message_types': ['general', 'clinic', 'attendance'],
        'max_recipients': 10,
    },
    'TEACHER': {
        'can_send_to': ['ADMIN', 'PARENT', 'NURSE', 'SUPER_TEACHER', 'USER'],
        'message_types': ['general', 'clinic', 'attendance'],
        'max_recipients': 10,
    },
    'PARENT': {
        'can_send_to': ['USER', 'TEACHER', 'ADMIN', 'NURSE', 'SUPER_TEACHER'],
        'message_types': ['general', 'clinic', 'attendance'],
        'max_recipients': 5,
    },
    'NURSE': {
        'can_send_to': ['USER', 'TEACHER', 'ADMIN', 'PARENT', 'SUPER_TEACHER'],
        'message_types': ['general', 'clinic', 'attendance'],
        'max_recipients': 10,
    },
    'SPONSOR': {
        'can_send_to': ['SPONSORSHIPS_OVERSEER', 'ADMIN'],
        'message_types': ['general', 'payment'],
        'max_recipients': 3,
        'requires_approval': True,
    },
    'SPONSORSHIPS_OVERSEER': {
        'can_send_to': ['SPONSOR', 'ADMIN', 'SPONSORSHIP_COORDINATOR'],
        'message_types': ['general', 'payment'],
        'max_recipients': 50,
    },
    'SPONSORSHIP_COORDINATOR': {
        'can_send_to': ['SPONSOR', 'SPONSORSHIPS_OVERSEER', 'ADMIN', 'PARENT'],
        'message_types': ['general', 'payment'],
        'max_recipients': 20,
    },
}


def default_messaging_privileges():
    return [p['id'] for p in MESSAGING_PRIVILEGES if p['is_default']]


def with_default_messaging_privileges(privileges=None):
    """User privileges plus the defaults everyone gets"""
    merged = default_messaging_privileges()
    for privilege in privileges or []:
        if privilege not in merged:
            merged.append(privilege)
    return merged


def can_user_message_role(privileges, target_role):
    effective = with_default_messaging_privileges(privileges)
    for privilege in MESSAGING_PRIVILEGES:
        if privilege['target_role'] == target_role:
            return privilege['id'] in effective
    return False


def get_messagable_roles(privileges):
    roles = []
    for privilege in MESSAGING_PRIVILEGES:
        role = privilege['target_role']
        if role not in roles and can_user_message_role(privileges, role):
            roles.append(role)
    return roles


def can_send_message_to(sender_role, recipient_role):
    rules = MESSAGE_PRIVILEGES.get(sender_role)
    return bool(rules) and recipient_role in rules['can_send_to']


def get_allowed_message_types(role):
    return MESSAGE_PRIVILEGES.get(role, {}).get('message_types') or ['general']


def get_max_recipients(role):
    return MESSAGE_PRIVILEGES.get(role, {}).get('max_recipients') or 1


def requires_approval(role):
    return MESSAGE_PRIVILEGES.get(role, {}).get('requires_approval', False)


def get_eligible_recipients(sender_role):
    rules = MESSAGE_PRIVILEGES.get(sender_role)
    return list(rules['can_send_to']) if rules else []


def validate_message_permissions(sender_role, recipient_role, message_type, recipient_count=1):
    """
    Check role, then message type, then recipient count.
    Returns ``(allowed, reason)``; reason is None when allowed.
    """
    if not can_send_message_to(sender_role, recipient_role):
        return False, f'{sender_role} is not authorized to send messages to {recipient_role}'

    if message_type not in get_allowed_message_types(sender_role):
        return False, f'{sender_role} is not authorized to send {message_type} messages'

    max_recipients = get_max_recipients(sender_role)
    if recipient_count > max_recipients:
        return False, f'{sender_role} can only send messages to {max_recipients} recipients at once'

    return True, None
