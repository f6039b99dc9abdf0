import logging
from collections import OrderedDict
from datetime import datetime, time, timedelta

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Count
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date
from .dashboard import get_dashboard_stats
from .models import WeeklyReport
from .serializers import WeeklyReportSerializer
from backend.billing.fees import current_term_and_year
from backend.core.permissions import HasPrivilege, user_has_privilege, privilege_denied
from backend.core.utils import notify_admins

logger = logging.getLogger('backend.reports')

UPDATABLE_FIELDS = ('content', 'achievements', 'challenges', 'next_week_goals', 'status')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def weekly_report_list_create(request):
    """List weekly reports, newest first, or submit one"""
    if request.method == 'GET':
        serializer = WeeklyReportSerializer(WeeklyReport.objects.all(), many=True)
        return Response(serializer.data)
    else:  # POST
        if not user_has_privilege(request.user, 'submit_reports'):
            return privilege_denied('submit_reports')
        data = request.data
        if not data.get('user_id') or not data.get('user_name') or not data.get('content'):
            return Response({'error': 'User ID, name, and content are required'},
                            status=status.HTTP_400_BAD_REQUEST)

        payload = {key: value for key, value in data.items() if value is not None}
        payload['user_id'] = str(data['user_id'])
        payload.setdefault('user_role', 'user')
        payload.setdefault('report_type', 'user')
        payload.setdefault('status', 'submitted')
        serializer = WeeklyReportSerializer(data=payload)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        report = serializer.save()

        period = ''
        if report.week_start and report.week_end:
            period = f" for {report.week_start.isoformat()} - {report.week_end.isoformat()}"
        notified = notify_admins(
            title='New Weekly Report Submitted',
            message=f"{report.user_name} ({report.user_role}) has submitted a weekly report{period}",
            type='WEEKLY_REPORT'
        )
        logger.info(f"Weekly report {report.id} submitted by {report.user_name}, {notified} admins notified")
        return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def weekly_report_user(request, user_id):
    """Reports submitted by one user"""
    reports = WeeklyReport.objects.filter(user_id=str(user_id))
    return Response(WeeklyReportSerializer(reports, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def weekly_report_week(request, week_start):
    """Reports submitted in the 7 days starting at week_start"""
    try:
        start = parse_date(week_start)
    except ValueError:
        start = None
    if start is None:
        return Response({'error': 'Invalid week start, expected YYYY-MM-DD'}, status=status.HTTP_400_BAD_REQUEST)
    window_start = timezone.make_aware(datetime.combine(start, time.min))
    window_end = timezone.make_aware(datetime.combine(start + timedelta(days=6), time.max))
    reports = WeeklyReport.objects.filter(submitted_at__gte=window_start, submitted_at__lte=window_end)
    return Response(WeeklyReportSerializer(reports, many=True).data)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def weekly_report_detail(request, pk):
    """Update the body of a weekly report or delete it"""
    report = WeeklyReport.objects.filter(pk=pk).first()
    if not report:
        return Response({'error': 'Weekly report not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method in ['PUT', 'PATCH']:
        # Empty values leave the stored field untouched
        payload = {field: request.data[field] for field in UPDATABLE_FIELDS if request.data.get(field)}
        serializer = WeeklyReportSerializer(report, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        report.delete()
        logger.info(f"Weekly report {pk} deleted")
        return Response({'message': 'Weekly report deleted successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasPrivilege('view_weekly_reports')])
def weekly_report_admin(request):
    """Reports grouped by month, then by submission day, newest first"""
    months = OrderedDict()
    for report in WeeklyReport.objects.order_by('-submitted_at'):
        day = timezone.localtime(report.submitted_at).date()
        month_key = day.strftime('%Y-%m')
        months.setdefault(month_key, OrderedDict()).setdefault(day, []).append(report)

    result = []
    for month_key in sorted(months, reverse=True):
        days = months[month_key]
        weeks = []
        for day in sorted(days, reverse=True):
            reports = days[day]
            users = []
            for report in reports:
                if report.user_name not in users:
                    users.append(report.user_name)
            weeks.append({
                'week': day.isoformat(),
                'weekStart': day.isoformat(),
                'weekEnd': (day + timedelta(days=6)).isoformat(),
                'reports': WeeklyReportSerializer(reports, many=True).data,
                'reportCount': len(reports),
                'users': users,
            })
        result.append({
            'month': month_key,
            'monthName': datetime.strptime(month_key, '%Y-%m').strftime('%B %Y'),
            'weeks': weeks,
        })
    return Response(result)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def weekly_report_stats(request):
    """Report totals for the admin dashboard"""
    total_reports = WeeklyReport.objects.count()
    this_week = WeeklyReport.objects.filter(submitted_at__gte=timezone.now() - timedelta(days=7)).count()
    unique_users = WeeklyReport.objects.values('user_id').annotate(count=Count('id')).count()
    return Response({
        'totalReports': total_reports,
        'thisWeekReports': this_week,
        'uniqueUsers': unique_users,
        'averageReportsPerUser': total_reports / (unique_users or 1),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Headline school numbers for the current term"""
    term, year = current_term_and_year()
    return Response(get_dashboard_stats(term, year, timezone.localdate()))
