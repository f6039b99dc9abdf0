"""
Management command to move billing types onto a term
Usage: python manage.py update_billing_terms --year 2025 --term "Term 3" [--class "Senior 1"]

--year and --term fall back to the UPDATE_YEAR and UPDATE_TERM environment
variables, then to the current school settings.
"""
import os

from django.core.management.base import BaseCommand
from django.db.models import Count

from backend.billing.fees import current_term_and_year
from backend.billing.models import BillingType


class Command(BaseCommand):
    help = 'Set the term on every billing type of a year, then summarize billing types by class'

    def add_arguments(self, parser):
        parser.add_argument('--year', type=str, help='Year whose billing types are updated')
        parser.add_argument('--term', type=str, help='Term to assign, e.g. "Term 3"')
        parser.add_argument('--class', dest='class_name', type=str, help='Only update this class')

    def handle(self, *args, **options):
        settings_term, settings_year = current_term_and_year()
        year = options.get('year') or os.getenv('UPDATE_YEAR') or settings_year
        term = options.get('term') or os.getenv('UPDATE_TERM') or settings_term

        self.stdout.write(f'Updating billing type terms to "{term}" for year {year}...')

        billing_types = BillingType.objects.filter(year=year)
        if options.get('class_name'):
            billing_types = billing_types.filter(class_name=options['class_name'])
        updated = billing_types.update(term=term)

        self.stdout.write(self.style.SUCCESS(f'Updated {updated} billing type records'))

        summary = BillingType.objects.values('class_name', 'term', 'year').annotate(
            items=Count('id')
        ).order_by('class_name', 'year', 'term')

        self.stdout.write('\nCurrent term/year summary by class:')
        for row in summary:
            self.stdout.write(f" - {row['class_name']}: {row['term']} {row['year']} ({row['items']} items)")
