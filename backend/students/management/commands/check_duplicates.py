"""
Management command to report students that look like duplicates
Usage: python manage.py check_duplicates
"""
from collections import defaultdict

from django.core.management.base import BaseCommand

from backend.students.models import Student


class Command(BaseCommand):
    help = 'Report name|class|age groups holding more than one student'

    def handle(self, *args, **options):
        groups = defaultdict(list)
        for student in Student.objects.all().order_by('created_at'):
            key = f"{student.name.strip().lower()}|{student.class_name}|{student.age}"
            groups[key].append(student)

        duplicates = {key: students for key, students in groups.items() if len(students) > 1}

        self.stdout.write("=" * 80)
        self.stdout.write(self.style.SUCCESS("DUPLICATE STUDENT REPORT"))
        self.stdout.write("=" * 80)
        self.stdout.write(f"Students analyzed: {sum(len(s) for s in groups.values())}")
        self.stdout.write("")

        if not duplicates:
            self.stdout.write(self.style.SUCCESS("No duplicate students found"))
            return

        for key, students in duplicates.items():
            self.stdout.write(self.style.WARNING(f"{key} ({len(students)} records)"))
            for student in students:
                self.stdout.write(
                    f"  #{student.id} {student.name} access={student.access_number or '-'} "
                    f"status={student.status} created={student.created_at:%Y-%m-%d %H:%M}"
                )

        self.stdout.write("")
        self.stdout.write(self.style.WARNING(f"Found {len(duplicates)} duplicate groups"))
