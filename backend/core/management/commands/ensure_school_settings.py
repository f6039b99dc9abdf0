"""
Management command to create the school settings row when it is missing
Usage: python manage.py ensure_school_settings [--year 2025] [--term "Term 1"]
"""
from django.core.management.base import BaseCommand

from backend.core.models import SchoolSettings


class Command(BaseCommand):
    help = 'Create the school settings row with defaults if it does not exist'

    def add_arguments(self, parser):
        parser.add_argument('--year', type=str, help='Current academic year')
        parser.add_argument('--term', type=str, help='Current term, e.g. "Term 1"')

    def handle(self, *args, **options):
        exists = SchoolSettings.objects.filter(pk=SchoolSettings.SINGLETON_ID).exists()
        settings_row = SchoolSettings.load()

        if options.get('year'):
            settings_row.current_year = options['year']
        if options.get('term'):
            settings_row.current_term = options['term']

        if exists and not (options.get('year') or options.get('term')):
            self.stdout.write('  School settings already exist')
            return

        settings_row.save()
        verb = 'Updated' if exists else 'Created'
        self.stdout.write(self.style.SUCCESS(
            f'✓ {verb} school settings: {settings_row.current_term} {settings_row.current_year}'
        ))
