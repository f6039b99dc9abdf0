import logging
from datetime import datetime, time

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from .models import ClinicRecord
from .serializers import ClinicRecordSerializer, ClinicRecordUpdateSerializer
from backend.core.permissions import HasPrivilege, user_has_privilege, privilege_denied
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)


def parse_when(value, end_of_day=False):
    """Parse an ISO datetime or date string into an aware datetime, or None"""
    if not value:
        return None
    value = str(value)
    try:
        # Bare dates go through parse_date so end_of_day applies
        parsed = parse_datetime(value) if len(value) > 10 else None
        if parsed is None:
            day = parse_date(value[:10])
            if day is None:
                return None
            parsed = datetime.combine(day, time.max if end_of_day else time.min)
    except ValueError:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def clinic_record_list_create(request):
    """List clinic visits, newest first, or record a new visit"""
    if request.method == 'GET':
        records = ClinicRecord.objects.all()
        student_id = request.query_params.get('student_id')
        if student_id:
            records = records.filter(student_id=student_id)
        serializer = ClinicRecordSerializer(records, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'add_clinic_record'):
            return privilege_denied('add_clinic_record')
        data = request.data
        if not all(data.get(field) for field in ('student_id', 'student_name', 'nurse_id', 'nurse_name')):
            return Response(
                {'error': 'Student ID, student name, nurse ID, and nurse name are required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        visit_date = parse_when(data.get('visit_date'))
        if visit_date is None:
            return Response({'error': 'Invalid visit date format'}, status=status.HTTP_400_BAD_REQUEST)

        payload = {key: value for key, value in data.items() if value is not None}
        payload['visit_date'] = visit_date
        # An unparseable follow-up date is dropped rather than rejected
        payload['follow_up_date'] = parse_when(data.get('follow_up_date'))
        payload.setdefault('status', 'resolved')
        if payload.get('cost') in ('', None):
            payload['cost'] = 0

        serializer = ClinicRecordSerializer(data=payload)
        if serializer.is_valid():
            record = serializer.save()
            logger.info(f"Clinic visit recorded for {record.student_name} by {record.nurse_name}")
            create_audit_log(
                request=request,
                action='create',
                model_name='ClinicRecord',
                object_id=record.id,
                object_name=record.student_name,
                object_reference=record.access_number
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasPrivilege('view_clinic_records')])
def clinic_record_date_range(request):
    """Clinic visits between two dates, inclusive"""
    start = request.query_params.get('start') or request.query_params.get('startDate')
    end = request.query_params.get('end') or request.query_params.get('endDate')
    if not start or not end:
        return Response({'error': 'Start date and end date are required'}, status=status.HTTP_400_BAD_REQUEST)

    start_at = parse_when(start)
    end_at = parse_when(end, end_of_day=True)
    if start_at is None or end_at is None:
        return Response({'error': 'Invalid date format'}, status=status.HTTP_400_BAD_REQUEST)

    records = ClinicRecord.objects.filter(visit_date__gte=start_at, visit_date__lte=end_at)
    serializer = ClinicRecordSerializer(records, many=True)
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def clinic_record_detail(request, pk):
    """Retrieve, update or delete a clinic visit"""
    record = get_object_or_404(ClinicRecord, pk=pk)

    if request.method == 'GET':
        serializer = ClinicRecordSerializer(record)
        return Response(serializer.data)
    elif request.method in ['PUT', 'PATCH']:
        if not user_has_privilege(request.user, 'edit_clinic_record'):
            return privilege_denied('edit_clinic_record')
        data = dict(request.data.items())
        if 'follow_up_date' in data:
            data['follow_up_date'] = parse_when(data['follow_up_date'])
        serializer = ClinicRecordUpdateSerializer(record, data=data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(ClinicRecordSerializer(record).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if not user_has_privilege(request.user, 'delete_clinic_record'):
            return privilege_denied('delete_clinic_record')
        create_audit_log(
            request=request,
            action='delete',
            model_name='ClinicRecord',
            object_id=record.id,
            object_name=record.student_name,
            object_reference=record.access_number
        )
        record.delete()
        return Response({'message': 'Clinic record deleted successfully'})
