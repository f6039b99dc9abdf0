"""Supported currencies and conversion through UGX"""
from decimal import Decimal

# Value of one unit in UGX
SUPPORTED_CURRENCIES = [
    {'code': 'UGX', 'name': 'Ugandan Shilling', 'symbol': 'UGX', 'exchangeRate': Decimal('1.0')},
    {'code': 'USD', 'name': 'US Dollar', 'symbol': '$', 'exchangeRate': Decimal('3700.0')},
    {'code': 'EUR', 'name': 'Euro', 'symbol': '€', 'exchangeRate': Decimal('4000.0')},
    {'code': 'GBP', 'name': 'British Pound', 'symbol': '£', 'exchangeRate': Decimal('4600.0')},
    {'code': 'KES', 'name': 'Kenyan Shilling', 'symbol': 'KSh', 'exchangeRate': Decimal('25.0')},
    {'code': 'TZS', 'name': 'Tanzanian Shilling', 'symbol': 'TSh', 'exchangeRate': Decimal('1.6')},
    {'code': 'RWF', 'name': 'Rwandan Franc', 'symbol': 'RF', 'exchangeRate': Decimal('3.0')},
]

UGX_RATES = {currency['code']: currency['exchangeRate'] for currency in SUPPORTED_CURRENCIES}


class UnknownCurrency(ValueError):
    pass


def convert(amount, from_currency, to_currency):
    """
    Convert an amount between supported currencies.
    Returns ``(converted_amount, exchange_rate, ugx_equivalent)``.
    """
    from_rate = UGX_RATES.get(from_currency)
    to_rate = UGX_RATES.get(to_currency)
    if from_rate is None or to_rate is None:
        raise UnknownCurrency(f'Exchange rates not found for {from_currency}/{to_currency}')
    ugx_amount = Decimal(str(amount)) * from_rate
    return ugx_amount / to_rate, from_rate / to_rate, ugx_amount
