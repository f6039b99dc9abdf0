"""
Access number and admission ID generation

Access numbers look like ``AB03``: class code, stream code and the lowest
two-digit number not held by an active student in that class and stream.
Admission IDs look like ``Mh25B04``: month code, two-digit year, class code
and a running count for that month.
"""
import random
import re
import string
import time

from django.utils import timezone

from .models import Student, OVERSEER_PREFIX

ACCESS_CLASS_CODES = {
    'Senior 1': 'A',
    'Senior 2': 'B',
    'Senior 3': 'C',
    'Senior 4': 'D',
    'Senior 5': 'E',
    'Senior 6': 'F',
}

ADMISSION_CLASS_CODES = {
    'Senior 1': 'A',
    'Senior 2': 'B',
    'Senior 3': 'C',
    'Senior 4': 'D',
}

# January..December
MONTH_CODES = ['Ja', 'F', 'Mh', 'Al', 'My', 'Je', 'Jy', 'At', 'S', 'O', 'N', 'D']

TRAILING_NUMBER_RE = re.compile(r'(\d{2})$')

BASE36 = string.digits + string.ascii_lowercase


def access_class_code(class_name):
    return ACCESS_CLASS_CODES.get(class_name, 'X')


def stream_code(stream):
    """First letter of the stream, uppercased; N when missing or not A-Z"""
    if not stream or not stream.strip():
        return 'N'
    first = stream.strip().upper()[0]
    return first if 'A' <= first <= 'Z' else 'N'


def admission_class_code(class_name):
    return ADMISSION_CLASS_CODES.get(class_name, 'X')


def month_code(month):
    """Code for a 1-based month number"""
    return MONTH_CODES[month - 1]


def used_access_numbers(class_name, stream):
    """Trailing numbers held by active students in a class/stream"""
    used = set()
    access_numbers = Student.objects.filter(
        class_name=class_name, stream=stream, status='active'
    ).values_list('access_number', flat=True)
    for access_number in access_numbers:
        match = TRAILING_NUMBER_RE.search(access_number or '')
        if match:
            used.add(int(match.group(1)))
    return used


def next_access_number(class_name, stream):
    """Lowest free access number for a class and stream"""
    used = used_access_numbers(class_name, stream)
    number = 1
    while number in used:
        number += 1
    return f"{access_class_code(class_name)}{stream_code(stream)}{number:02d}"


def next_admission_id(class_name, when=None):
    """
    Next admission ID for the month of ``when`` (default now).

    The running number counts every student, whatever their status, whose
    admission ID starts with the same month code and year.
    """
    when = when or timezone.now()
    prefix = f"{month_code(when.month)}{when.strftime('%y')}"
    count = Student.objects.filter(admission_id__startswith=prefix).count()
    return f"{prefix}{admission_class_code(class_name)}{count + 1:02d}"


def overseer_placeholder():
    """Placeholder access number / admission ID for overseer admissions"""
    suffix = ''.join(random.choices(BASE36, k=9))
    return f"{OVERSEER_PREFIX}{int(time.time() * 1000)}-{suffix}"


def is_placeholder(value):
    return bool(value) and value.startswith(OVERSEER_PREFIX)


def is_highest_numbered(student):
    """
    True when the student holds the highest access number among active
    students in their class/stream. Its number is then not worth recycling.
    """
    top = Student.objects.filter(
        class_name=student.class_name,
        stream=student.stream,
        status='active'
    ).order_by('-access_number').values_list('access_number', flat=True).first()
    return top is not None and top == student.access_number
