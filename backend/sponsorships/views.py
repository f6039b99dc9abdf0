import logging
from datetime import datetime, time, timedelta
from decimal import Decimal, InvalidOperation

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from .models import Sponsorship
from .serializers import SponsorshipSerializer
from backend.students.models import Student
from backend.core.permissions import user_has_privilege, privilege_denied
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MONTHS = 12

# action -> (sponsorship status, student sponsorship_status or None, privilege)
STATUS_ACTIONS = {
    'approve': ('coordinator-approved', None, 'approve_sponsorship'),
    'reject': ('rejected', 'available-for-sponsors', 'reject_sponsorship'),
    'complete': ('completed', None, 'manage_sponsorships'),
    'approve-sponsored': ('sponsored', 'sponsored', 'approve_sponsorship'),
}


def _parse_start(value):
    if not value:
        return timezone.now()
    try:
        parsed = parse_datetime(str(value))
        if parsed is None:
            day = parse_date(str(value))
            if day is None:
                return None
            parsed = datetime.combine(day, time.min)
    except ValueError:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sponsorship_list_create(request):
    """List sponsorships or pledge a new one"""
    if request.method == 'GET':
        sponsorships = Sponsorship.objects.select_related('student')
        status_filter = request.query_params.get('status')
        if status_filter:
            sponsorships = sponsorships.filter(status=status_filter)
        serializer = SponsorshipSerializer(sponsorships, many=True)
        return Response(serializer.data)
    else:  # POST
        data = request.data
        if not data.get('studentId') or not data.get('sponsorName') or not data.get('amount'):
            return Response({'error': 'Missing required fields'}, status=status.HTTP_400_BAD_REQUEST)
        try:
            amount = Decimal(str(data.get('amount')))
            duration = int(data.get('duration') or DEFAULT_DURATION_MONTHS)
            student_pk = int(data.get('studentId'))
        except (InvalidOperation, ValueError, TypeError):
            return Response({'error': 'Invalid student id, amount or duration'}, status=status.HTTP_400_BAD_REQUEST)
        if not amount.is_finite() or amount <= 0:
            return Response({'error': 'Amount must be greater than zero'}, status=status.HTTP_400_BAD_REQUEST)
        start_date = _parse_start(data.get('sponsorshipStartDate'))
        if start_date is None:
            return Response({'error': 'Invalid sponsorship start date'}, status=status.HTTP_400_BAD_REQUEST)

        student = get_object_or_404(Student, pk=student_pk)
        with transaction.atomic():
            sponsorship = Sponsorship.objects.create(
                student=student,
                sponsor_id=data.get('sponsorId') or None,
                sponsor_name=data['sponsorName'],
                sponsor_country=data.get('sponsorCountry') or 'Uganda',
                amount=amount,
                type=data.get('sponsorRelationship') or 'individual',
                status='pending',
                start_date=start_date,
                end_date=start_date + timedelta(days=duration * 30),
                description=data.get('description') or ''
            )
            student.sponsorship_status = 'under-sponsorship-review'
            student.save(update_fields=['sponsorship_status', 'updated_at'])

        logger.info(f"Sponsorship {sponsorship.id} pledged by {sponsorship.sponsor_name} for student {student.id}")
        create_audit_log(
            request=request,
            action='create',
            model_name='Sponsorship',
            object_id=sponsorship.id,
            object_name=sponsorship.sponsor_name,
            object_reference=student.access_number,
            changes={'amount': str(amount), 'student': student.name}
        )
        return Response(SponsorshipSerializer(sponsorship).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def sponsorship_detail(request, pk):
    """Retrieve, update or delete a sponsorship"""
    sponsorship = get_object_or_404(Sponsorship.objects.select_related('student'), pk=pk)

    if request.method == 'GET':
        serializer = SponsorshipSerializer(sponsorship)
        return Response(serializer.data)
    elif request.method in ['PUT', 'PATCH']:
        if not user_has_privilege(request.user, 'manage_sponsorships'):
            return privilege_denied('manage_sponsorships')
        serializer = SponsorshipSerializer(sponsorship, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if not user_has_privilege(request.user, 'manage_sponsorships'):
            return privilege_denied('manage_sponsorships')
        create_audit_log(
            request=request,
            action='delete',
            model_name='Sponsorship',
            object_id=sponsorship.id,
            object_name=sponsorship.sponsor_name
        )
        sponsorship.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sponsorship_status_action(request, pk, action):
    """Move a sponsorship through the review pipeline, updating the student where needed"""
    new_status, student_status, privilege = STATUS_ACTIONS[action]
    if not user_has_privilege(request.user, privilege):
        return privilege_denied(privilege)

    sponsorship = Sponsorship.objects.select_related('student').filter(pk=pk).first()
    if not sponsorship:
        return Response({'error': 'Sponsorship not found', 'id': pk}, status=status.HTTP_404_NOT_FOUND)

    previous = sponsorship.status
    with transaction.atomic():
        sponsorship.status = new_status
        sponsorship.save(update_fields=['status', 'updated_at'])
        if student_status:
            student = sponsorship.student
            student.sponsorship_status = student_status
            student.save(update_fields=['sponsorship_status', 'updated_at'])

    logger.info(f"Sponsorship {sponsorship.id} moved from {previous} to {new_status}")
    create_audit_log(
        request=request,
        action='sponsorship_status',
        model_name='Sponsorship',
        object_id=sponsorship.id,
        object_name=sponsorship.sponsor_name,
        object_reference=sponsorship.student.access_number,
        changes={'status': {'old': previous, 'new': new_status}}
    )
    return Response(SponsorshipSerializer(sponsorship).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def student_sponsorship_status(request, student_id, sponsorship_status):
    """Mark a student available for sponsors or eligible for sponsorship"""
    if not user_has_privilege(request.user, 'manage_sponsorships'):
        return privilege_denied('manage_sponsorships')
    student = get_object_or_404(Student, pk=student_id)
    student.sponsorship_status = sponsorship_status
    student.save(update_fields=['sponsorship_status', 'updated_at'])
    return Response({
        'id': student.id,
        'name': student.name,
        'sponsorship_status': student.sponsorship_status
    })
