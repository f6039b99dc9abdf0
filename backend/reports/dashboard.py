"""
Dashboard statistics

Counts are cached for DASHBOARD_CACHE_TTL and dropped whenever a student,
staff, payment, clinic or attendance row changes (see core.cache_signals).
"""
from decimal import Decimal

from django.db.models import Count, Sum

from backend.core.cache_utils import cached_query, DASHBOARD_CACHE_TTL, DASHBOARD_KEY_PREFIX
from backend.attendance.models import Attendance
from backend.billing.models import FinancialRecord
from backend.clinic.models import ClinicRecord
from backend.staff.models import Staff
from backend.students.models import Student


@cached_query(cache_ttl=DASHBOARD_CACHE_TTL, key_prefix=DASHBOARD_KEY_PREFIX)
def get_dashboard_stats(term, year, today):
    students_by_status = {
        row['status']: row['count']
        for row in Student.objects.values('status').annotate(count=Count('id'))
    }

    payments = FinancialRecord.objects.filter(type='payment', term=term, year=year)
    payment_totals = payments.aggregate(total=Sum('amount'), count=Count('id'))

    attendance_today = {
        row['status']: row['count']
        for row in Attendance.objects.filter(date=today).values('status').annotate(count=Count('id'))
    }

    return {
        'term': term,
        'year': year,
        'date': today.isoformat(),
        'totalStudents': sum(students_by_status.values()),
        'studentsByStatus': students_by_status,
        'totalStaff': Staff.objects.count(),
        'paymentsThisTerm': {
            'count': payment_totals['count'] or 0,
            'total': float(payment_totals['total'] or Decimal('0.00')),
        },
        'clinicVisitsThisMonth': ClinicRecord.objects.filter(
            visit_date__year=today.year, visit_date__month=today.month
        ).count(),
        'attendanceToday': attendance_today,
    }
