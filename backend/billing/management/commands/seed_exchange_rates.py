"""
Management command to store the default UGX exchange rates
Usage: python manage.py seed_exchange_rates
"""
from django.core.management.base import BaseCommand

from backend.billing.currency import SUPPORTED_CURRENCIES
from backend.billing.models import ExchangeRate


class Command(BaseCommand):
    help = 'Insert the default <currency> -> UGX exchange rates that are missing'

    def handle(self, *args, **options):
        created = 0
        for currency in SUPPORTED_CURRENCIES:
            if currency['code'] == 'UGX':
                continue
            exists = ExchangeRate.objects.filter(
                from_currency=currency['code'], to_currency='UGX'
            ).exists()
            if exists:
                self.stdout.write(f"  {currency['code']} -> UGX already present")
                continue
            ExchangeRate.objects.create(
                from_currency=currency['code'],
                to_currency='UGX',
                rate=currency['exchangeRate']
            )
            created += 1
            self.stdout.write(f"  {currency['code']} -> UGX @ {currency['exchangeRate']}")

        self.stdout.write(self.style.SUCCESS(f'\nCompleted: {created} exchange rates created'))
