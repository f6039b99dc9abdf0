import json
import logging
import time
from decimal import Decimal, InvalidOperation

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.core.files.base import ContentFile
from django.db.models import Sum
from django.http import FileResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from .models import Staff
from .serializers import StaffSerializer
from backend.billing.fees import current_term_and_year
from backend.billing.models import FinancialRecord
from backend.billing.serializers import FinancialRecordSerializer
from backend.core.files import decode_upload, extension_for, InvalidUpload
from backend.core.permissions import HasPrivilege, user_has_privilege, privilege_denied
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)

# request key -> (file field, type field, default mime, default extension, label)
DOCUMENT_UPLOADS = {
    'cvFile': ('cv_file', 'cv_file_type', 'application/pdf', 'pdf', 'cv'),
    'passportPhoto': ('passport_photo', 'passport_photo_type', 'image/jpeg', 'jpg', 'passport'),
}


def _prepare_payload(data):
    """Copy of the request body without upload objects, with attachments as a list"""
    payload = {key: value for key, value in data.items() if key not in DOCUMENT_UPLOADS}
    attachments = payload.get('attachments')
    if isinstance(attachments, str):
        try:
            payload['attachments'] = json.loads(attachments) if attachments else []
        except ValueError:
            payload['attachments'] = [attachments]
    return payload


def _decode_documents(data):
    """
    Decode any CV / passport uploads in the request without touching the record.
    Raises InvalidUpload before anything is written.
    """
    documents = []
    for key, (file_field, type_field, default_mime, default_ext, label) in DOCUMENT_UPLOADS.items():
        upload = data.get(key)
        if not isinstance(upload, dict) or not upload.get('fileData'):
            continue
        mime_type, content = decode_upload(upload, default_mime=default_mime)
        filename = f"{label}_{int(time.time() * 1000)}.{extension_for(mime_type, default_ext)}"
        documents.append((file_field, type_field, filename, mime_type, content))
    return documents


def _attach_documents(staff, documents):
    update_fields = []
    for file_field, type_field, filename, mime_type, content in documents:
        getattr(staff, file_field).save(filename, ContentFile(content), save=False)
        setattr(staff, type_field, mime_type)
        update_fields += [file_field, type_field]
    if update_fields:
        staff.save(update_fields=update_fields + ['updated_at'])


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def staff_list_create(request):
    """List all staff or create a staff record"""
    if request.method == 'GET':
        staff = Staff.objects.all()
        role = request.query_params.get('role')
        if role:
            staff = staff.filter(role=role)
        serializer = StaffSerializer(staff, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'add_staff'):
            return privilege_denied('add_staff')
        if not (request.data.get('name') or '').strip():
            return Response({'error': 'Name is required'}, status=status.HTTP_400_BAD_REQUEST)
        serializer = StaffSerializer(data=_prepare_payload(request.data))
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            documents = _decode_documents(request.data)
        except InvalidUpload as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        staff = serializer.save()
        _attach_documents(staff, documents)
        create_audit_log(
            request=request,
            action='create',
            model_name='Staff',
            object_id=staff.id,
            object_name=staff.name,
            changes={'role': staff.role}
        )
        return Response(StaffSerializer(staff).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def staff_detail(request, pk):
    """Retrieve, update or delete a staff record"""
    staff = get_object_or_404(Staff, pk=pk)

    if request.method == 'GET':
        serializer = StaffSerializer(staff)
        return Response(serializer.data)
    elif request.method in ['PUT', 'PATCH']:
        if not user_has_privilege(request.user, 'edit_staff'):
            return privilege_denied('edit_staff')
        serializer = StaffSerializer(staff, data=_prepare_payload(request.data), partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            documents = _decode_documents(request.data)
        except InvalidUpload as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        staff = serializer.save()
        _attach_documents(staff, documents)
        return Response(StaffSerializer(staff).data)
    else:  # DELETE
        if not user_has_privilege(request.user, 'delete_staff'):
            return privilege_denied('delete_staff')
        create_audit_log(
            request=request,
            action='delete',
            model_name='Staff',
            object_id=staff.id,
            object_name=staff.name
        )
        for field in ('cv_file', 'passport_photo'):
            document = getattr(staff, field)
            if document:
                document.delete(save=False)
        staff.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasPrivilege('view_staff')])
def staff_cv_download(request, pk):
    """Download a staff member's CV as an attachment"""
    staff = get_object_or_404(Staff, pk=pk)
    if not staff.cv_file:
        return Response({'error': 'CV not found'}, status=status.HTTP_404_NOT_FOUND)
    filename = staff.cv_file.name.rsplit('/', 1)[-1] or 'cv.pdf'
    return FileResponse(
        staff.cv_file.open('rb'),
        as_attachment=True,
        filename=filename,
        content_type=staff.cv_file_type or 'application/pdf'
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasPrivilege('view_staff')])
def staff_passport(request, pk):
    """Serve a staff member's passport photo inline"""
    staff = get_object_or_404(Staff, pk=pk)
    if not staff.passport_photo:
        return Response({'error': 'Passport photo not found'}, status=status.HTTP_404_NOT_FOUND)
    return FileResponse(
        staff.passport_photo.open('rb'),
        content_type=staff.passport_photo_type or 'image/jpeg'
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasPrivilege('process_payment')])
def staff_pay(request, pk):
    """Record a salary payment to a staff member"""
    staff = get_object_or_404(Staff, pk=pk)
    try:
        amount = Decimal(str(request.data.get('amount')))
    except (InvalidOperation, ValueError):
        return Response({'error': 'Invalid amount'}, status=status.HTTP_400_BAD_REQUEST)
    if not amount.is_finite() or amount <= 0:
        return Response({'error': 'Invalid amount'}, status=status.HTTP_400_BAD_REQUEST)

    term, year = current_term_and_year()
    now = timezone.now()
    record = FinancialRecord.objects.create(
        student_id=staff.payment_key,
        type='staff_payment',
        billing_type='staff_salary',
        billing_amount=amount,
        amount=amount,
        description=request.data.get('description') or f"Salary payment to {staff.name}",
        date=now,
        payment_date=now,
        payment_method=request.data.get('method') or 'cash',
        status='paid',
        balance=Decimal('0.00'),
        term=term,
        year=year
    )
    logger.info(f"Staff payment of {amount} recorded for {staff.name}")
    create_audit_log(
        request=request,
        action='staff_payment',
        model_name='FinancialRecord',
        object_id=record.id,
        object_name=staff.name,
        object_reference=staff.payment_key,
        changes={'amount': str(amount)}
    )
    return Response({'success': True, 'record': FinancialRecordSerializer(record).data},
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def staff_payment_list(request):
    """Latest 200 staff payments, each with its staff member"""
    role = request.query_params.get('role')
    records = FinancialRecord.objects.filter(type='staff_payment').order_by('-date')[:200]

    staff_ids = set()
    for record in records:
        key = record.student_id or ''
        if key.startswith('staff:') and key[6:].isdigit():
            staff_ids.add(int(key[6:]))
    staff_by_id = {staff.id: staff for staff in Staff.objects.filter(id__in=staff_ids)}

    result = []
    for record in records:
        key = record.student_id or ''
        staff_id = int(key[6:]) if key.startswith('staff:') and key[6:].isdigit() else None
        staff = staff_by_id.get(staff_id)
        if role and staff and staff.role != role:
            continue
        item = FinancialRecordSerializer(record).data
        item['staffId'] = staff_id
        item['staff'] = StaffSerializer(staff).data if staff else None
        result.append(item)
    return Response(result)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def staff_payment_summary(request, pk):
    """Total paid to a staff member and what remains of the contract amount"""
    staff = get_object_or_404(Staff, pk=pk)
    records = FinancialRecord.objects.filter(type='staff_payment', student_id=staff.payment_key).order_by('-date')
    total_paid = records.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')
    amount_to_pay = staff.amount_to_pay or Decimal('0.00')
    remaining = max(Decimal('0.00'), amount_to_pay - total_paid) if amount_to_pay > 0 else Decimal('0.00')
    return Response({
        'staff': {
            'id': staff.id,
            'name': staff.name,
            'role': staff.role,
            'amountToPay': float(staff.amount_to_pay) if staff.amount_to_pay is not None else None
        },
        'totalPaid': float(total_paid),
        'remaining': float(remaining),
        'payments': FinancialRecordSerializer(records, many=True).data
    })
