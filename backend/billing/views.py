import logging
import time
from collections import OrderedDict
from decimal import Decimal, InvalidOperation

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import F, Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from .models import BillingType, FeeStructure, FinancialRecord, ExchangeRate
from .serializers import (
    BillingTypeSerializer, FeeStructureSerializer, FinancialRecordSerializer, ExchangeRateSerializer
)
from .fees import (
    DEFAULT_FEE_NAME, current_term_and_year, filter_fee_items_by_residence, needs_sync,
    normalize_residence, rebuild_class_fee_structures, resolve_class_fee_structure, fee_structure_from_billing
)
from .currency import SUPPORTED_CURRENCIES, convert, UnknownCurrency
from backend.students.models import Student
from backend.core.permissions import IsSchoolAdmin, HasPrivilege, user_has_privilege, privilege_denied
from backend.core.utils import create_audit_log

logger = logging.getLogger(__name__)


def _find_student(identifier):
    """Find a student by numeric id, then by access number"""
    if identifier in (None, ''):
        return None
    identifier = str(identifier).strip()
    if identifier.isdigit():
        student = Student.objects.filter(pk=int(identifier)).first()
        if student:
            return student
    return Student.objects.filter(access_number=identifier).first()


# Billing type views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def billing_type_list_create(request):
    """List billing types or create a new one"""
    if request.method == 'GET':
        billing_types = BillingType.objects.all()
        class_name = request.query_params.get('class_name')
        if class_name:
            billing_types = billing_types.filter(class_name=class_name)
        serializer = BillingTypeSerializer(billing_types, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'edit_settings'):
            return privilege_denied('edit_settings')
        serializer = BillingTypeSerializer(data=request.data)
        if serializer.is_valid():
            billing_type = serializer.save()
            logger.info(f"Created billing type {billing_type.name} for {billing_type.class_name}")
            create_audit_log(
                request=request,
                action='create',
                model_name='BillingType',
                object_id=billing_type.id,
                object_name=billing_type.name,
                object_reference=billing_type.class_name,
                changes=serializer.data
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, HasPrivilege('edit_settings')])
def billing_type_detail(request, pk):
    """Update or delete a billing type"""
    billing_type = get_object_or_404(BillingType, pk=pk)

    if request.method == 'PUT':
        serializer = BillingTypeSerializer(billing_type, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='BillingType',
            object_id=billing_type.id,
            object_name=billing_type.name,
            object_reference=billing_type.class_name
        )
        billing_type.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Fee structure views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fee_structure_list(request):
    """All active fee structures grouped by class"""
    fee_structures = FeeStructure.objects.filter(is_active=True).order_by('class_name', 'fee_name')

    grouped = OrderedDict()
    for fee in fee_structures:
        grouped.setdefault(fee.class_name, []).append(fee)

    return Response({
        'feeStructures': {
            class_name: FeeStructureSerializer(fees, many=True).data
            for class_name, fees in grouped.items()
        },
        'classTotals': {
            class_name: float(sum((fee.amount for fee in fees), Decimal('0.00')))
            for class_name, fees in grouped.items()
        },
        'totalClasses': len(grouped)
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fee_structure_for_class(request, class_name):
    """
    Fee structure for one class, optionally for a term and year.
    Rebuilt from billing types first when the two have drifted apart.
    """
    term = request.query_params.get('term')
    year = request.query_params.get('year')

    fee_structures = FeeStructure.objects.filter(class_name=class_name, is_active=True)
    billing_types = BillingType.objects.filter(class_name=class_name)
    if term and year:
        fee_structures = fee_structures.filter(term=term, year=year)
        billing_types = billing_types.filter(term=term, year=year)

    fee_structures = list(fee_structures.order_by('fee_name'))
    billing_types = list(billing_types)

    synced = needs_sync(fee_structures, billing_types)
    if synced:
        fee_structures = rebuild_class_fee_structures(class_name, billing_types)

    total_fees = sum((fee.amount for fee in fee_structures), Decimal('0.00'))
    return Response({
        'className': class_name,
        'feeStructures': FeeStructureSerializer(fee_structures, many=True).data,
        'totalFees': float(total_fees),
        'feeCount': len(fee_structures),
        'synced': synced
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasPrivilege('edit_settings')])
def fee_structure_sync(request):
    """Mirror billing types into fee structures for one class or all classes"""
    class_name = request.data.get('className')
    billing_types = BillingType.objects.all()
    if class_name:
        billing_types = billing_types.filter(class_name=str(class_name))

    by_class = OrderedDict()
    for billing_type in billing_types.order_by('class_name', 'name'):
        if billing_type.class_name:
            by_class.setdefault(billing_type.class_name, []).append(billing_type)

    results = {}
    for cls, rows in by_class.items():
        created = rebuild_class_fee_structures(cls, rows)
        results[cls] = {
            'created': len(created),
            'totalFees': float(sum((fee.amount for fee in created), Decimal('0.00')))
        }

    return Response({'success': True, 'classes': len(by_class), 'results': results})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def fee_structure_purge_rebuild(request):
    """Delete every fee structure and rebuild them all from billing types"""
    billing_types = list(BillingType.objects.all())
    classes = {billing_type.class_name for billing_type in billing_types if billing_type.class_name}

    with transaction.atomic():
        FeeStructure.objects.all().delete()
        created = FeeStructure.objects.bulk_create([
            fee_structure_from_billing(billing_type) for billing_type in billing_types
        ])

    logger.warning(f"Fee structures purged and rebuilt by {request.user}: {len(created)} rows")
    return Response({'success': True, 'classes': len(classes), 'created': len(created)})


# Payment views
@api_view(['POST'])
@permission_classes([IsAuthenticated, HasPrivilege('process_payment')])
def payment_process(request):
    """Record a fee payment for a student"""
    student = _find_student(request.data.get('studentId'))
    student_name = request.data.get('studentName')
    if not student and student_name:
        student = Student.objects.filter(name__icontains=student_name).first()
    if not student:
        return Response({'error': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)

    try:
        amount = Decimal(str(request.data.get('amount') or 0))
    except (InvalidOperation, ValueError):
        amount = Decimal('0')
    if not amount.is_finite() or amount <= 0:
        return Response({'error': 'Invalid or missing amount'}, status=status.HTTP_400_BAD_REQUEST)

    billing_type = request.data.get('billingType') or request.data.get('paymentType') or 'payment'
    method = str(request.data.get('paymentMethod') or request.data.get('method') or 'cash')
    reference = request.data.get('paymentReference') or request.data.get('reference') or ''
    description = request.data.get('description') or (
        f"Payment for {billing_type} - {method}" + (f" (Ref: {reference})" if reference else '')
    )
    term, year = current_term_and_year()
    now = timezone.now()

    with transaction.atomic():
        record = FinancialRecord.objects.create(
            student_id=str(student.id),
            type='payment',
            billing_type=billing_type,
            billing_amount=amount,
            amount=amount,
            description=description,
            date=now,
            payment_date=now,
            payment_time=timezone.localtime(now).strftime('%H:%M:%S'),
            payment_method=method,
            status='paid',
            receipt_number=f"RC{int(time.time() * 1000)}",
            balance=Decimal('0.00'),
            term=term,
            year=year
        )
        Student.objects.filter(pk=student.pk).update(fees_paid=F('fees_paid') + amount)

    logger.info(f"Payment {record.receipt_number} of {amount} recorded for student {student.id}")
    create_audit_log(
        request=request,
        action='payment_add',
        model_name='FinancialRecord',
        object_id=record.id,
        object_name=student.name,
        object_reference=record.receipt_number,
        changes={'amount': str(amount), 'billingType': billing_type, 'method': method}
    )
    return Response({
        'success': True,
        'message': 'Payment processed successfully',
        'record': FinancialRecordSerializer(record).data
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_student_list(request, student_id):
    """Payments made by a student, newest first"""
    payments = FinancialRecord.objects.filter(student_id=str(student_id), type='payment')
    serializer = FinancialRecordSerializer(payments, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payment_summary(request, student_id):
    """
    Fee breakdown for a student this term: what each fee item requires,
    what has been paid against it and what remains.
    """
    student = _find_student(student_id)
    record_key = str(student.id) if student else str(student_id)
    financial_records = FinancialRecord.objects.filter(student_id=record_key)

    if student and student.class_name:
        structure = resolve_class_fee_structure(student.class_name)
    else:
        term, year = current_term_and_year()
        structure = {'items': [], 'total': Decimal('0.00'), 'currentTerm': term, 'currentYear': year}
    residence = normalize_residence(student.residence_type if student else None) or 'Day'
    items, total_required = filter_fee_items_by_residence(structure['items'], residence)
    current_term = structure['currentTerm']
    current_year = structure['currentYear']

    paid_records = [
        record for record in financial_records
        if record.type in ('payment', 'sponsorship')
        and record.status == 'paid'
        and (record.term or '').lower() == str(current_term).lower()
        and str(record.year or '') == str(current_year)
    ]
    paid_by_type = {}
    for record in paid_records:
        key = (record.billing_type or DEFAULT_FEE_NAME).lower()
        paid_by_type[key] = paid_by_type.get(key, Decimal('0.00')) + record.amount

    breakdown = []
    for item in items:
        name = item.name or DEFAULT_FEE_NAME
        required = item.amount or Decimal('0.00')
        paid = paid_by_type.get(name.lower(), Decimal('0.00'))
        breakdown.append({
            'feeName': name,
            'billingType': name,
            'required': float(required),
            'paid': float(paid),
            'remaining': float(max(Decimal('0.00'), required - paid)),
            'frequency': item.frequency or '',
            'term': item.term or current_term,
            'year': item.year or current_year,
        })

    total_paid = sum((record.amount for record in paid_records), Decimal('0.00'))
    return Response({
        'paymentBreakdown': breakdown,
        'totalPaid': float(total_paid),
        'totalFeesRequired': float(total_required),
        'balance': float(max(Decimal('0.00'), total_required - total_paid)),
        'financialRecords': FinancialRecordSerializer(financial_records, many=True).data,
        'source': 'fee_structure'
    })


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def payment_clear_all(request):
    """Delete every financial record"""
    deleted, _ = FinancialRecord.objects.all().delete()
    logger.warning(f"All financial records cleared by {request.user}: {deleted} rows")
    return Response({'success': True, 'deleted': {'financialRecords': deleted}})


# Financial record views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def financial_record_list_create(request):
    """List all financial records or create a new one"""
    if request.method == 'GET':
        records = FinancialRecord.objects.all()
        record_type = request.query_params.get('type')
        if record_type:
            records = records.filter(type=record_type)
        serializer = FinancialRecordSerializer(records, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'add_financial_record'):
            return privilege_denied('add_financial_record')
        serializer = FinancialRecordSerializer(data=request.data)
        if serializer.is_valid():
            record = serializer.save(date=serializer.validated_data.get('date') or timezone.now())
            create_audit_log(
                request=request,
                action='create',
                model_name='FinancialRecord',
                object_id=record.id,
                object_reference=record.receipt_number or record.student_id,
                changes={'type': record.type, 'amount': str(record.amount)}
            )
            return Response(FinancialRecordSerializer(record).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def financial_record_student(request, student_id):
    """Financial records for one student, newest first"""
    records = FinancialRecord.objects.filter(student_id=str(student_id))
    serializer = FinancialRecordSerializer(records, many=True)
    return Response(serializer.data)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def financial_record_detail(request, pk):
    """Update or delete a financial record"""
    record = get_object_or_404(FinancialRecord, pk=pk)

    if request.method == 'PUT':
        if not user_has_privilege(request.user, 'edit_financial_record'):
            return privilege_denied('edit_financial_record')
        serializer = FinancialRecordSerializer(record, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if not user_has_privilege(request.user, 'delete_financial_record'):
            return privilege_denied('delete_financial_record')
        create_audit_log(
            request=request,
            action='delete',
            model_name='FinancialRecord',
            object_id=record.id,
            object_reference=record.receipt_number or record.student_id,
            changes={'type': record.type, 'amount': str(record.amount)}
        )
        record.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def financial_record_summary(request, student_id):
    """Totals of a student's financial records by type and status"""
    records = FinancialRecord.objects.filter(student_id=str(student_id))

    def total(queryset):
        return queryset.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')

    total_fees = total(records.filter(type='fee'))
    total_paid = total(records.filter(type='payment', status='paid'))
    return Response({
        'totalFees': float(total_fees),
        'totalPaid': float(total_paid),
        'totalPending': float(total(records.filter(status='pending'))),
        'totalOverdue': float(total(records.filter(status='overdue'))),
        'balance': float(total_fees - total_paid),
        'recordCount': records.count()
    })


# Currency views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def currency_list(request):
    """Supported currencies with their value in UGX"""
    return Response([
        {**currency, 'exchangeRate': float(currency['exchangeRate'])}
        for currency in SUPPORTED_CURRENCIES
    ])


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def exchange_rate_list_create(request):
    """Latest stored exchange rates, or store a new one"""
    if request.method == 'GET':
        rates = ExchangeRate.objects.all()[:100]
        serializer = ExchangeRateSerializer(rates, many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'edit_settings'):
            return privilege_denied('edit_settings')
        serializer = ExchangeRateSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def currency_convert(request):
    """Convert an amount between two supported currencies"""
    amount = request.data.get('amount')
    from_currency = request.data.get('fromCurrency')
    to_currency = request.data.get('toCurrency')
    if not amount or not from_currency or not to_currency:
        return Response({'error': 'Missing required fields'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        original = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return Response({'error': 'Amount must be a number'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        converted, rate, ugx_amount = convert(original, from_currency, to_currency)
    except UnknownCurrency:
        return Response({'error': 'Exchange rates not found for currencies'}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'originalAmount': float(original),
        'originalCurrency': from_currency,
        'convertedAmount': float(converted),
        'convertedCurrency': to_currency,
        'exchangeRate': float(rate),
        'ugxEquivalent': float(ugx_amount)
    })
