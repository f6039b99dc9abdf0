import django_filters
from django.db.models import Q
from .models import Student


class StudentFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    class_name = django_filters.CharFilter(field_name='class_name', lookup_expr='iexact')
    stream = django_filters.CharFilter(field_name='stream', lookup_expr='iexact')
    status = django_filters.CharFilter(field_name='status')
    sponsorship_status = django_filters.CharFilter(field_name='sponsorship_status')
    admitted_by = django_filters.CharFilter(field_name='admitted_by')
    residence_type = django_filters.CharFilter(field_name='residence_type', lookup_expr='iexact')

    class Meta:
        model = Student
        fields = ['search', 'class_name', 'stream', 'status', 'sponsorship_status', 'admitted_by', 'residence_type']

    def filter_search(self, queryset, name, value):
        """Search by name, access number, admission ID or parent name"""
        if not value:
            return queryset
        value = value.strip()
        return queryset.filter(
            Q(name__icontains=value) |
            Q(access_number__icontains=value) |
            Q(admission_id__icontains=value) |
            Q(parent_name__icontains=value)
        )


def students_visible_to(user):
    """Parents only see the students assigned to them"""
    queryset = Student.objects.all()
    if getattr(user, 'role', None) == 'PARENT':
        queryset = queryset.filter(id__in=user.student_ids or [])
    return queryset
