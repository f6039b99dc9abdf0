import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from .models import Message
from .privileges import (
    MESSAGE_PRIVILEGES, get_eligible_recipients, get_messagable_roles, get_allowed_message_types,
    get_max_recipients, requires_approval, validate_message_permissions
)
from .serializers import MessageSerializer, conversation_item
from backend.core.models import User
from backend.core.privileges import get_effective_privileges
from backend.core.permissions import is_school_admin
from backend.core.utils import numeric_id

logger = logging.getLogger(__name__)


def _can_see_user(request, user_id):
    return request.user.pk == user_id or is_school_admin(request.user)


def _is_party(user, message):
    return user.pk in (message.sender_id, message.receiver_id) or is_school_admin(user)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def message_list_create(request):
    """List messages or send a new one"""
    if request.method == 'GET':
        messages = Message.objects.select_related('sender', 'receiver')
        if not is_school_admin(request.user):
            messages = messages.filter(Q(sender=request.user) | Q(receiver=request.user))
        serializer = MessageSerializer(messages, many=True)
        return Response(serializer.data)
    else:  # POST
        data = request.data
        if not data.get('from') or not data.get('subject') or not data.get('content'):
            return Response({'error': 'Sender, subject and content are required'},
                            status=status.HTTP_400_BAD_REQUEST)

        sender_id = numeric_id(data.get('from'))
        if sender_id is None:
            return Response({'error': 'Invalid sender ID format. Expected numeric ID.'},
                            status=status.HTTP_400_BAD_REQUEST)
        receiver_id = None
        if data.get('to') not in (None, ''):
            receiver_id = numeric_id(data.get('to'))
            if receiver_id is None:
                return Response({'error': 'Invalid receiver ID format. Expected numeric ID.'},
                                status=status.HTTP_400_BAD_REQUEST)

        if sender_id != request.user.id and not is_school_admin(request.user):
            return Response({'error': 'You can only send messages as yourself'},
                            status=status.HTTP_403_FORBIDDEN)

        sender = User.objects.filter(pk=sender_id).first()
        if not sender:
            return Response({'error': 'Sender not found'}, status=status.HTTP_400_BAD_REQUEST)
        receiver = None
        if receiver_id is not None:
            receiver = User.objects.filter(pk=receiver_id).first()
            if not receiver:
                return Response({'error': 'Receiver not found'}, status=status.HTTP_400_BAD_REQUEST)

        message_type = data.get('type') or 'GENERAL'
        if receiver and sender.role in MESSAGE_PRIVILEGES and receiver.role in MESSAGE_PRIVILEGES:
            allowed, reason = validate_message_permissions(sender.role, receiver.role, message_type.lower())
            if not allowed:
                logger.warning(f"Message from user {sender.id} to user {receiver.id} blocked: {reason}")
                return Response({'error': reason}, status=status.HTTP_403_FORBIDDEN)

        try:
            created_at = parse_datetime(data['date']) if isinstance(data.get('date'), str) else None
        except ValueError:
            created_at = None
        if created_at and timezone.is_naive(created_at):
            created_at = timezone.make_aware(created_at)
        message = Message.objects.create(
            sender=sender,
            receiver=receiver,
            title=data['subject'],
            content=data['content'],
            type=message_type,
            priority=data.get('priority') or 'normal',
            is_pinned=bool(data.get('isPinned', False)),
            created_at=created_at or timezone.now()
        )
        logger.info(f"Message {message.id} sent from user {sender.id} to {receiver_id or 'all'}")
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_user_list(request, user_id):
    """Messages a user sent or received, newest first"""
    if not _can_see_user(request, user_id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    messages = Message.objects.select_related('sender', 'receiver').filter(
        Q(sender_id=user_id) | Q(receiver_id=user_id)
    )
    return Response([conversation_item(message) for message in messages])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_unread_count(request, user_id=None):
    """Unread count for one receiver, or for everyone when an admin omits the id"""
    if user_id is None and not is_school_admin(request.user):
        user_id = request.user.pk
    if user_id is not None and not _can_see_user(request, user_id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    messages = Message.objects.filter(read=False)
    if user_id is not None:
        messages = messages.filter(receiver_id=user_id)
    return Response({'count': messages.count()})


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def message_detail(request, pk):
    """Mark a message read/unread or delete it"""
    message = get_object_or_404(Message.objects.select_related('sender', 'receiver'), pk=pk)
    if not _is_party(request.user, message):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ['PUT', 'PATCH']:
        message.read = request.data.get('read') is True
        update_fields = ['read']
        if 'isPinned' in request.data:
            message.is_pinned = bool(request.data.get('isPinned'))
            update_fields.append('is_pinned')
        message.save(update_fields=update_fields)
        return Response(MessageSerializer(message).data)
    else:  # DELETE
        message.delete()
        return Response({'message': 'Message deleted successfully'})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def message_mark_all_read(request, user_id):
    """Mark every unread message for a receiver as read"""
    if not _can_see_user(request, user_id):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    updated = Message.objects.filter(receiver_id=user_id, read=False).update(read=True)
    return Response({'updated': updated})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def message_eligible_recipients(request):
    """Roles and users the current user may message"""
    role = request.user.role
    if role in MESSAGE_PRIVILEGES:
        roles = get_eligible_recipients(role)
    else:
        # Roles outside the matrix go by their message_* grants
        roles = get_messagable_roles(get_effective_privileges(request.user))
    users = User.objects.filter(role__in=roles, status='ACTIVE').exclude(pk=request.user.pk).order_by('name')
    return Response({
        'roles': roles,
        'messageTypes': get_allowed_message_types(role),
        'maxRecipients': get_max_recipients(role),
        'requiresApproval': requires_approval(role),
        'users': [{'id': user.id, 'name': user.name or user.username, 'role': user.role} for user in users],
    })
