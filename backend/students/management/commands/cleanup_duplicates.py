"""
Management command to remove duplicate students, keeping the oldest record
Usage: python manage.py cleanup_duplicates [--apply]

Students with a live status (active, pending, sponsored) are grouped by
name (case-insensitive), class and parent name. Without --apply the
command only reports what it would delete.
"""
from collections import defaultdict

from django.core.management.base import BaseCommand
from django.db import transaction

from backend.students.duplicates import LIVE_STATUSES
from backend.students.models import Student


class Command(BaseCommand):
    help = 'Delete newer duplicate students, keeping the oldest of each group'

    def add_arguments(self, parser):
        parser.add_argument(
            '--apply',
            action='store_true',
            help='Actually delete duplicates (default is a dry run)',
        )

    def handle(self, *args, **options):
        apply = options.get('apply', False)

        students = list(Student.objects.filter(status__in=LIVE_STATUSES).order_by('created_at', 'id'))
        groups = defaultdict(list)
        for student in students:
            key = f"{student.name.strip().lower()}|{student.class_name}|{(student.parent_name or '').lower()}"
            groups[key].append(student)

        if not apply:
            self.stdout.write(self.style.WARNING("DRY RUN: pass --apply to delete duplicates"))

        found = 0
        removed = 0
        with transaction.atomic():
            for key, members in groups.items():
                if len(members) < 2:
                    continue
                keep, extra = members[0], members[1:]
                found += len(extra)
                self.stdout.write(f"\n{key}")
                self.stdout.write(self.style.SUCCESS(f"  KEEP   #{keep.id} {keep.name} ({keep.access_number})"))
                for duplicate in extra:
                    self.stdout.write(f"  REMOVE #{duplicate.id} {duplicate.name} ({duplicate.access_number})")
                    if apply:
                        duplicate.delete()
                        removed += 1

        self.stdout.write("")
        self.stdout.write(f"Students analyzed: {len(students)}")
        self.stdout.write(f"Duplicates found: {found}")
        self.stdout.write(self.style.SUCCESS(f"Duplicates removed: {removed}"))
