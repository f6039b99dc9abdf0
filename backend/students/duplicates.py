"""
Duplicate prevention for student admission

Checks run in order and the first hit wins:

1. EXACT_MATCH     same name, class and parent name
2. SIMILAR_MATCH   same name and class
3. OVERSEER_MATCH  same name and class, admitted through the overseer workflow
4. TEMPORAL_MATCH  same name and class, created within the last 30 days

Names compare case-insensitively, classes exactly.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta

from django.db import DatabaseError
from django.db.models import Q
from django.utils import timezone

from .models import Student, OVERSEER_PREFIX

logger = logging.getLogger(__name__)

LIVE_STATUSES = ['active', 'pending', 'sponsored']
RECENT_STATUSES = LIVE_STATUSES + ['awaiting']
RECENT_WINDOW = timedelta(days=30)


@dataclass
class DuplicateMatch:
    level: str
    error: str
    message: str
    details: str
    suggestion: str
    student: Student

    def existing_student(self):
        student = self.student
        data = {
            'id': student.id,
            'name': student.name,
            'class': student.class_name,
            'accessNumber': student.access_number,
            'createdAt': student.created_at,
        }
        if self.level == 'SIMILAR_MATCH':
            data['parentName'] = student.parent_name
        else:
            data['admissionId'] = student.admission_id
        if self.level == 'OVERSEER_MATCH':
            data['admittedBy'] = student.admitted_by
        return data

    def response_body(self):
        return {
            'error': self.error,
            'message': self.message,
            'details': self.details,
            'existingStudent': self.existing_student(),
            'suggestion': self.suggestion,
            'preventionLevel': self.level,
        }


def parent_name_from(data):
    """Parent name from a nested parent object, then a flat field"""
    parent = data.get('parent')
    if isinstance(parent, dict) and parent.get('name'):
        return parent['name']
    return data.get('parent_name') or data.get('parentName') or ''


def check_for_duplicates(name, class_name, parent_name=''):
    """Return the first DuplicateMatch for a would-be admission, or None"""
    if not name or not class_name:
        return None

    base = Student.objects.filter(name__iexact=name, class_name=class_name)
    live = base.filter(status__in=LIVE_STATUSES)

    exact = live.filter(parent_name=parent_name or '').first()
    if exact:
        return DuplicateMatch(
            level='EXACT_MATCH',
            error='DUPLICATE_STUDENT_DETECTED',
            message='Duplicate student detected',
            details=f'A student with name "{name}" already exists in class "{class_name}" with the same parent information.',
            suggestion='Please check the existing student record or use different identifying information.',
            student=exact,
        )

    similar = live.first()
    if similar:
        return DuplicateMatch(
            level='SIMILAR_MATCH',
            error='SIMILAR_STUDENT_EXISTS',
            message='Similar student exists',
            details=f'A student with name "{name}" already exists in class "{class_name}". Please verify this is a different student or check the existing record.',
            suggestion='If this is the same student, please update the existing record instead of creating a new one.',
            student=similar,
        )

    # Unreachable after SIMILAR_MATCH: an overseer row with this name and class is also a live row
    overseer = live.filter(
        Q(access_number__startswith=OVERSEER_PREFIX) |
        Q(admission_id__startswith=OVERSEER_PREFIX) |
        Q(admitted_by='overseer')
    ).first()
    if overseer:
        return DuplicateMatch(
            level='OVERSEER_MATCH',
            error='OVERSEER_STUDENT_EXISTS',
            message='Overseer student exists',
            details=f'An overseer student with name "{name}" already exists in class "{class_name}".',
            suggestion='Check the overseer student record before creating a new registration.',
            student=overseer,
        )

    recent = base.filter(
        status__in=RECENT_STATUSES,
        created_at__gte=timezone.now() - RECENT_WINDOW
    ).first()
    if recent:
        return DuplicateMatch(
            level='TEMPORAL_MATCH',
            error='RECENT_DUPLICATE_DETECTED',
            message='Recent duplicate attempt',
            details=f'A student with name "{name}" was recently created in class "{class_name}". Please wait a few minutes before creating another student with the same name.',
            suggestion='Wait a moment and check whether the first admission went through.',
            student=recent,
        )

    return None


def check_admission_data(data):
    """
    Run the duplicate check against a request payload.
    Database errors are logged and treated as "no duplicate" so admission can proceed.
    """
    name = data.get('name')
    class_name = data.get('class_name') or data.get('class')
    try:
        return check_for_duplicates(name, class_name, parent_name_from(data))
    except DatabaseError as e:
        logger.error(f"Duplicate check failed, continuing with admission: {str(e)}")
        return None
