import logging
import time

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from decimal import Decimal
from .models import Student, DroppedAccessNumber
from .serializers import (
    StudentSerializer, DroppedAccessNumberSerializer, flatten_parents
)
from .filters import StudentFilter, students_visible_to
from .duplicates import check_admission_data, RECENT_STATUSES
from .numbering import (
    next_access_number, next_admission_id, overseer_placeholder,
    is_placeholder, is_highest_numbered
)
from .classes import CLASSES, get_class
from backend.core.files import save_image_upload, InvalidUpload
from backend.core.permissions import HasPrivilege, user_has_privilege, privilege_denied
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)

PHOTO_FIELDS = {
    'photo': 'profile',
    'family_photo': 'family',
    'passport_photo': 'passport',
}

CONDUCT_NOTE_TYPES = ['positive', 'negative', 'warning', 'achievement', 'incident']
CONDUCT_NOTE_MAX_LENGTH = 1000


def _store_photo_uploads(data):
    """
    Replace ``{fileData, fileType}`` photo objects in ``data`` with stored paths.
    Returns an error Response, or None when every upload was stored.
    """
    for field, kind in PHOTO_FIELDS.items():
        upload = data.get(field)
        if not isinstance(upload, dict):
            continue
        try:
            data[field] = save_image_upload(upload, folder='uploads')
        except InvalidUpload as e:
            logger.warning(f"Rejected {kind} photo upload: {str(e)}")
            return Response(
                {'error': f'Invalid {kind} photo file type. Only images are allowed.'},
                status=status.HTTP_400_BAD_REQUEST
            )
    return None


def _drop_access_number(student, reason):
    """
    Put the student's access number on the dropped list unless it is the
    highest in its class/stream. Returns whether it was the highest.
    """
    highest = is_highest_numbered(student)
    if not highest and student.access_number and not is_placeholder(student.access_number):
        DroppedAccessNumber.objects.create(
            access_number=student.access_number,
            class_name=student.class_name,
            stream_name=student.stream,
            reason=reason
        )
        logger.info(f"Access number {student.access_number} dropped: {reason}")
    return highest


def _admission_fee_total(class_name, residence_type):
    from backend.billing.fees import student_fee_total
    return student_fee_total(class_name, residence_type)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def student_list_create(request):
    """List students with filtering or admit a new student"""
    if request.method == 'GET':
        filterset = StudentFilter(request.query_params, queryset=students_visible_to(request.user))
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = StudentSerializer(filterset.qs, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'add_student'):
            return privilege_denied('add_student')
        return _admit_student(request)


def _admit_student(request):
    data = flatten_parents(request.data)

    name = (data.get('name') or '').strip()
    if not name:
        return Response({'error': 'Name is required'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        age = int(data.get('age') or 0)
    except (TypeError, ValueError):
        age = 0
    if age <= 0:
        return Response({'error': 'Valid age is required'}, status=status.HTTP_400_BAD_REQUEST)
    class_name = data.get('class_name')
    if not class_name:
        return Response({'error': 'Class is required'}, status=status.HTTP_400_BAD_REQUEST)
    admitted_by = data.get('admitted_by') or data.get('admittedBy') or 'admin'
    is_overseer = admitted_by == 'overseer'
    stream = data.get('stream') or ''
    if not stream and not is_overseer:
        return Response({'error': 'Stream is required'}, status=status.HTTP_400_BAD_REQUEST)

    duplicate = check_admission_data({**data, 'name': name})
    if duplicate:
        logger.warning(f"Blocked {duplicate.level} admission for {name} in {class_name}")
        create_audit_log(
            request=request,
            action='duplicate_blocked',
            model_name='Student',
            object_id=duplicate.student.id,
            object_name=name,
            object_reference=duplicate.student.access_number,
            changes={'preventionLevel': duplicate.level, 'class': class_name}
        )
        return Response(duplicate.response_body(), status=status.HTTP_400_BAD_REQUEST)

    existing = Student.objects.filter(
        name__iexact=name, class_name=class_name, status__in=RECENT_STATUSES
    ).first()
    if existing:
        return Response({
            'error': 'Duplicate student detected',
            'details': f'A student named "{name}" is already registered in {class_name}.',
            'existingStudent': {
                'id': existing.id,
                'name': existing.name,
                'class': existing.class_name,
                'accessNumber': existing.access_number,
                'status': existing.status,
            }
        }, status=status.HTTP_400_BAD_REQUEST)

    # Access number
    access_number = data.get('access_number') or ''
    if is_overseer:
        access_number = overseer_placeholder()
    elif not access_number:
        original = request.data.get('originalAccessNumber')
        if request.data.get('isReAdmission') and original:
            if not Student.objects.filter(access_number=original, status='active').exists():
                access_number = original
        if not access_number:
            dropped = DroppedAccessNumber.objects.filter(
                class_name=class_name, stream_name=stream
            ).order_by('dropped_at').first()
            access_number = dropped.access_number if dropped else next_access_number(class_name, stream)
    if not is_placeholder(access_number):
        if Student.objects.filter(access_number=access_number, status='active').exists():
            return Response({
                'error': 'Access number already exists',
                'details': f'Access number {access_number} is held by an active student.'
            }, status=status.HTTP_400_BAD_REQUEST)

    # Admission ID
    admission_id = data.get('admission_id') or ''
    if is_overseer:
        admission_id = overseer_placeholder()
    elif not admission_id:
        admission_id = next_admission_id(class_name)
    if not is_placeholder(admission_id) and Student.objects.filter(admission_id=admission_id).exists():
        return Response({
            'error': 'Admission ID already exists',
            'details': f'Admission ID {admission_id} is already assigned to another student.'
        }, status=status.HTTP_400_BAD_REQUEST)

    payload = dict(data)
    payload.update({
        'name': name,
        'age': age,
        'class_name': class_name,
        'stream': stream,
        'access_number': access_number,
        'admission_id': admission_id,
        'admitted_by': admitted_by,
        'status': 'active',
        'sponsorship_status': data.get('sponsorship_status') or ('pending' if is_overseer else 'awaiting'),
    })
    if not payload.get('phone_country_code'):
        payload['phone_country_code'] = 'UG'
    if payload.get('total_fees') in (None, ''):
        payload['total_fees'] = _admission_fee_total(class_name, payload.get('residence_type'))

    error = _store_photo_uploads(payload)
    if error:
        return error

    serializer = StudentSerializer(data=payload)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        if not is_placeholder(access_number):
            DroppedAccessNumber.objects.filter(access_number=access_number).delete()
            Student.objects.filter(access_number=access_number, status='re-admitted').delete()
        student = serializer.save()

    logger.info(f"Admitted student {student.name} as {student.access_number} ({admitted_by})")
    create_audit_log(
        request=request,
        action='student_admit',
        model_name='Student',
        object_id=student.id,
        object_name=student.name,
        object_reference=student.access_number,
        changes={'class': class_name, 'stream': stream, 'admittedBy': admitted_by}
    )
    return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_enrolled(request):
    """List active students"""
    students = students_visible_to(request.user).filter(status='active')
    serializer = StudentSerializer(students, many=True)
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def student_detail(request, pk):
    """Retrieve, update or delete a student"""
    student = get_object_or_404(students_visible_to(request.user), pk=pk)

    if request.method == 'GET':
        serializer = StudentSerializer(student)
        return Response(serializer.data)
    elif request.method in ['PUT', 'PATCH']:
        if not user_has_privilege(request.user, 'edit_student'):
            return privilege_denied('edit_student')
        data = flatten_parents(request.data)
        error = _store_photo_uploads(data)
        if error:
            return error
        serializer = StudentSerializer(student, data=data, partial=True)
        if serializer.is_valid():
            serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Student',
                object_id=student.id,
                object_name=student.name,
                object_reference=student.access_number,
                changes={'fields': sorted(serializer.validated_data.keys())}
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if not user_has_privilege(request.user, 'delete_student'):
            return privilege_denied('delete_student')
        if student.is_overseer_admission:
            return Response({
                'error': 'Cannot delete overseer-admitted student',
                'details': 'Overseer-admitted records are pupils and must remain until admitted by the school.'
            }, status=status.HTTP_403_FORBIDDEN)

        with transaction.atomic():
            highest = _drop_access_number(student, 'Student deleted')
            student_id = student.id
            access_number = student.access_number
            student_name = student.name
            student.delete()

        create_audit_log(
            request=request,
            action='student_delete',
            model_name='Student',
            object_id=student_id,
            object_name=student_name,
            object_reference=access_number,
            changes={'isHighestNumbered': highest}
        )
        return Response({
            'message': 'Student deleted successfully',
            'droppedAccessNumber': access_number,
            'isHighestNumbered': highest
        })


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, HasPrivilege('flag_student')])
def student_flag(request, pk):
    """Flag a student as left, expelled, re-admitted, ..."""
    student = get_object_or_404(Student, pk=pk)
    new_status = request.data.get('status') or 'left'
    if new_status not in dict(Student.STATUS_CHOICES):
        return Response({'error': f'Invalid status: {new_status}'}, status=status.HTTP_400_BAD_REQUEST)
    comment = request.data.get('comment') or ''

    with transaction.atomic():
        if new_status != 're-admitted':
            _drop_access_number(student, f'Student flagged as {new_status}')
        student.status = new_status
        student.flag_comment = comment
        student.save(update_fields=['status', 'flag_comment', 'updated_at'])

    create_audit_log(
        request=request,
        action='student_flag',
        model_name='Student',
        object_id=student.id,
        object_name=student.name,
        object_reference=student.access_number,
        changes={'status': new_status, 'comment': comment}
    )
    return Response({
        'message': 'Student flagged successfully',
        'student': StudentSerializer(student).data,
        'accessNumber': student.access_number
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasPrivilege('edit_student_conduct')])
def student_conduct_notes(request, pk):
    """Append a conduct note to a student"""
    student = get_object_or_404(Student, pk=pk)
    content = request.data.get('content')
    note_type = request.data.get('type')
    author = request.data.get('author')

    if not content or not note_type or not author:
        return Response({'error': 'Content, type, and author are required'}, status=status.HTTP_400_BAD_REQUEST)
    if len(content) > CONDUCT_NOTE_MAX_LENGTH:
        return Response({'error': 'Content must be less than 1000 characters'}, status=status.HTTP_400_BAD_REQUEST)
    if note_type not in CONDUCT_NOTE_TYPES:
        return Response({'error': 'Invalid conduct note type'}, status=status.HTTP_400_BAD_REQUEST)

    now = timezone.now().isoformat()
    note = {
        'id': str(int(time.time() * 1000)),
        'content': content,
        'type': note_type,
        'author': author,
        'createdAt': now,
        'updatedAt': now,
    }
    student.conduct_notes = list(student.conduct_notes or []) + [note]
    student.save(update_fields=['conduct_notes', 'updated_at'])

    return Response({
        'message': 'Conduct note added successfully',
        'student': StudentSerializer(student).data,
        'newNote': note
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasPrivilege('admit_from_overseer')])
def student_approve_overseer(request, pk):
    """Give an overseer-admitted pupil a real access number"""
    student = get_object_or_404(Student, pk=pk)
    access_number = request.data.get('accessNumber')
    if not access_number:
        return Response({'error': 'Access number is required'}, status=status.HTTP_400_BAD_REQUEST)
    if Student.objects.filter(access_number=access_number, status='active').exclude(pk=student.pk).exists():
        return Response({'error': 'Access number already exists'}, status=status.HTTP_400_BAD_REQUEST)

    student.access_number = access_number
    student.sponsorship_status = 'approved'
    student.save(update_fields=['access_number', 'sponsorship_status', 'updated_at'])
    DroppedAccessNumber.objects.filter(access_number=access_number).delete()

    create_audit_log(
        request=request,
        action='update',
        model_name='Student',
        object_id=student.id,
        object_name=student.name,
        object_reference=access_number,
        changes={'sponsorship_status': 'approved'}
    )
    return Response({
        'message': 'Overseer admission approved successfully',
        'student': StudentSerializer(student).data
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def student_fee_balance(request, pk):
    """Outstanding fee balance for a student"""
    student = get_object_or_404(students_visible_to(request.user), pk=pk)
    total_fees = student.total_fees or Decimal('0.00')
    fees_paid = student.fees_paid or Decimal('0.00')
    balance = total_fees - fees_paid
    return Response({
        'studentId': student.id,
        'name': student.name,
        'accessNumber': student.access_number,
        'totalFees': float(total_fees),
        'feesPaid': float(fees_paid),
        'balance': float(balance),
        'isFullyPaid': balance <= 0
    })


# Dropped access numbers
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dropped_access_number_list(request):
    """List every dropped access number, oldest first"""
    dropped = DroppedAccessNumber.objects.all()
    serializer = DroppedAccessNumberSerializer(dropped, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dropped_access_number_by_stream(request, class_name, stream):
    """Reusable access numbers for a class and stream"""
    access_numbers = DroppedAccessNumber.objects.filter(
        class_name=class_name, stream_name=stream
    ).values_list('access_number', flat=True)
    return Response(list(access_numbers))


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, HasPrivilege('edit_student')])
def dropped_access_number_delete(request, access_number):
    """Remove an access number from the dropped list"""
    deleted, _ = DroppedAccessNumber.objects.filter(access_number=access_number).delete()
    if not deleted:
        return Response({'error': 'Dropped access number not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'message': 'Dropped access number removed successfully'})


# Classes
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def class_list(request):
    """Static class and stream catalog"""
    return Response(CLASSES)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def class_detail(request, class_id):
    cls = get_class(class_id)
    if cls is None:
        return Response({'error': 'Class not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(cls)
