import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date
from .models import Attendance
from .serializers import AttendanceSerializer
from backend.students.models import Student
from backend.core.cache_utils import invalidate_dashboard_cache
from backend.core.permissions import HasPrivilege, user_has_privilege, privilege_denied

logger = logging.getLogger(__name__)

PLACEHOLDER_REMARKS = 'Auto-generated placeholder for accountability'


def _parse_day(value):
    """Date part of an ISO date or datetime string, or None"""
    if not value:
        return None
    try:
        return parse_date(str(value)[:10])
    except ValueError:
        return None


def _now_time():
    return timezone.localtime().strftime('%H:%M:%S')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def attendance_list_create(request):
    """List attendance records or mark a student for a day"""
    if request.method == 'GET':
        records = Attendance.objects.all()
        serializer = AttendanceSerializer(records, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'mark_attendance'):
            return privilege_denied('mark_attendance')
        data = request.data
        required = ('student_id', 'date', 'status', 'teacher_id', 'teacher_name')
        if not all(data.get(field) for field in required):
            return Response(
                {'error': 'Student ID, date, status, teacher ID, and teacher name are required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        day = _parse_day(data.get('date'))
        if day is None:
            return Response({'error': 'Invalid date format'}, status=status.HTTP_400_BAD_REQUEST)
        if data.get('status') not in dict(Attendance.STATUS_CHOICES):
            return Response({'error': 'Invalid attendance status'}, status=status.HTTP_400_BAD_REQUEST)

        # One record per student per day: marking again overwrites
        record, created = Attendance.objects.update_or_create(
            student_id=str(data.get('student_id')),
            date=day,
            defaults={
                'status': data.get('status'),
                'time': data.get('time') or _now_time(),
                'teacher_id': str(data.get('teacher_id')),
                'teacher_name': data.get('teacher_name'),
                'remarks': data.get('remarks'),
                'notification_sent': bool(data.get('notification_sent', False)),
            }
        )
        logger.debug(f"{'Created' if created else 'Updated'} attendance for student {record.student_id} on {day}")
        return Response(AttendanceSerializer(record).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def attendance_by_student(request, student_id):
    """Attendance history for a student, newest first"""
    records = Attendance.objects.filter(student_id=str(student_id))
    serializer = AttendanceSerializer(records, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def attendance_by_date(request, date):
    """Attendance for one day, ordered by time"""
    day = _parse_day(date)
    if day is None:
        return Response({'error': 'Invalid date format'}, status=status.HTTP_400_BAD_REQUEST)
    records = Attendance.objects.filter(date=day).order_by('time')
    serializer = AttendanceSerializer(records, many=True)
    return Response(serializer.data)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def attendance_detail(request, pk):
    """Update the status, remarks or notification flag of a record, or delete it"""
    record = get_object_or_404(Attendance, pk=pk)

    if request.method in ['PUT', 'PATCH']:
        if not user_has_privilege(request.user, 'edit_attendance'):
            return privilege_denied('edit_attendance')
        data = {
            key: request.data[key]
            for key in ('status', 'remarks', 'notification_sent')
            if key in request.data
        }
        if 'status' in data and not data['status']:
            data.pop('status')
        serializer = AttendanceSerializer(record, data=data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if not user_has_privilege(request.user, 'delete_attendance'):
            return privilege_denied('delete_attendance')
        record.delete()
        return Response({'message': 'Attendance record deleted successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasPrivilege('mark_attendance')])
def attendance_ensure_daily(request):
    """Create not_marked placeholders for every student missing a record that day"""
    day = _parse_day(request.data.get('date')) or timezone.localdate()

    student_ids = [str(pk) for pk in Student.objects.values_list('id', flat=True)]
    marked = set(Attendance.objects.filter(date=day).values_list('student_id', flat=True))
    now_time = _now_time()

    with transaction.atomic():
        # ignore_conflicts: a concurrent call may insert the same (student, day) first
        Attendance.objects.bulk_create([
            Attendance(
                student_id=student_id,
                date=day,
                time=now_time,
                status='not_marked',
                teacher_id='system',
                teacher_name='System',
                remarks=PLACEHOLDER_REMARKS,
                notification_sent=False
            )
            for student_id in student_ids if student_id not in marked
        ], ignore_conflicts=True)
        created = Attendance.objects.filter(date=day).count() - len(marked)
        # bulk_create sends no post_save
        transaction.on_commit(invalidate_dashboard_cache)

    logger.info(f"Created {created} attendance placeholders for {day}")
    return Response({
        'success': True,
        'date': day.isoformat(),
        'created': created,
        'totalStudents': len(student_ids)
    })
