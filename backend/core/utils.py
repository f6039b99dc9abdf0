"""Audit trail and in-app notification helpers"""
import logging

from django.contrib.auth import get_user_model
from django.db import DatabaseError

from .models import AuditLog, Notification

logger = logging.getLogger(__name__)

User = get_user_model()


def get_client_ip(request):
    meta = getattr(request, 'META', None) or {}
    forwarded = meta.get('HTTP_X_FORWARDED_FOR', '')
    # First hop is the client when behind a proxy
    return forwarded.split(',')[0].strip() or meta.get('REMOTE_ADDR') or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Record who did what to which object.

    The acting user is `user` when given, else request.user. Anonymous actors
    are stored as NULL. object_name and object_reference are free text shown
    in the audit screen (a student's name, an access number, a receipt).

    Returns the AuditLog, or None when the entry was incomplete or could not
    be written. A failed audit write never aborts the caller's operation.
    """
    if not action or not model_name or object_id in (None, ''):
        logger.warning(f"Skipping audit entry {action!r} on {model_name!r} #{object_id!r}: incomplete")
        return None

    actor = user or getattr(request, 'user', None)
    if actor is not None and not actor.is_authenticated:
        actor = None

    try:
        return AuditLog.objects.create(
            user=actor,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request),
        )
    except DatabaseError:
        logger.exception(f"Audit entry {action} on {model_name} #{object_id} was not saved")
        return None


def notify_user(user, title, message, type='INFO'):
    try:
        return Notification.objects.create(user=user, title=title, message=message, type=type)
    except DatabaseError:
        logger.exception(f"Notification '{title}' for user {user.pk} was not saved")
        return None


def notify_admins(title, message, type='INFO'):
    """Send the same notification to every ADMIN user, returns how many were sent"""
    admins = User.objects.filter(role='ADMIN')
    try:
        created = Notification.objects.bulk_create(
            Notification(user=admin, title=title, message=message, type=type) for admin in admins
        )
    except DatabaseError:
        logger.exception(f"Admin notification '{title}' was not saved")
        return 0
    return len(created)


def numeric_id(value):
    """value as an int primary key, or None when it is not a whole number"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
