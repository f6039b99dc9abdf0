"""
Fee structure resolution

Billing types are the source of truth for what a class owes in a term.
Fee structures are a published mirror of them, rebuilt whenever the two
drift apart.
"""
import logging
from decimal import Decimal

from django.db import transaction

from backend.core.models import SchoolSettings
from .models import BillingType, FeeStructure

logger = logging.getLogger(__name__)

DEFAULT_FEE_NAME = 'General Fee'


def normalize_residence(value):
    """Map free-form residence text to 'Boarding', 'Day' or None"""
    raw = str(value or '').strip().lower()
    if 'board' in raw:
        return 'Boarding'
    if 'day' in raw:
        return 'Day'
    return None


def fee_label(item):
    """Lower-cased label of a fee item (dict, BillingType or FeeStructure)"""
    if isinstance(item, dict):
        label = item.get('feeName') or item.get('name')
    else:
        label = getattr(item, 'fee_name', None) or getattr(item, 'name', None)
    return str(label or '').strip().lower()


def fee_amount(item):
    value = item.get('amount') if isinstance(item, dict) else getattr(item, 'amount', None)
    return Decimal(str(value or 0))


def filter_fee_items_by_residence(items, residence=None):
    """
    Drop fee items that do not apply to a residence type.

    Boarding students skip lunch items, Day students (and unknown residence)
    skip boarding items. Returns ``(items, total)``.
    """
    items = list(items or [])
    if residence == 'Boarding':
        kept = [it for it in items if 'lunch' not in fee_label(it) and 'luch' not in fee_label(it)]
    else:
        kept = [it for it in items if 'board' not in fee_label(it)]
    total = sum((fee_amount(it) for it in kept), Decimal('0.00'))
    return kept, total


def current_term_and_year():
    settings = SchoolSettings.load()
    return settings.current_term or 'Term 1', str(settings.current_year or '')


def resolve_class_fee_structure(class_name):
    """
    Billing types for a class in the current settings term/year.

    Items are deduplicated by lower-cased name keeping the highest amount.
    Returns a dict with items, total, currentTerm and currentYear.
    """
    term, year = current_term_and_year()
    billing_types = BillingType.objects.filter(
        class_name=class_name, year=year, term__iexact=term
    ).order_by('name')

    best_by_name = {}
    for billing_type in billing_types:
        key = (billing_type.name or '').lower()
        if key not in best_by_name or billing_type.amount > best_by_name[key].amount:
            best_by_name[key] = billing_type
    items = list(best_by_name.values())

    if not items:
        logger.info(f"No fees found for {term} {year} for class {class_name}")

    return {
        'items': items,
        'total': sum((item.amount for item in items), Decimal('0.00')),
        'currentTerm': term,
        'currentYear': year,
    }


def student_fee_total(class_name, residence_type=None):
    """Fees owed this term by a student of a class and residence"""
    if not class_name:
        return Decimal('0.00')
    structure = resolve_class_fee_structure(class_name)
    _, total = filter_fee_items_by_residence(structure['items'], normalize_residence(residence_type))
    return total


def _sync_key(item):
    return f"{fee_label(item)}:{fee_amount(item).normalize()}"


def needs_sync(fee_structures, billing_types):
    """True when fee structures no longer mirror the billing types"""
    fee_structures = list(fee_structures)
    billing_types = list(billing_types)
    if not billing_types:
        return False
    if len(fee_structures) != len(billing_types):
        return True
    return {_sync_key(f) for f in fee_structures} != {_sync_key(b) for b in billing_types}


def fee_structure_from_billing(billing_type, class_name=None):
    return FeeStructure(
        class_name=class_name or billing_type.class_name or 'Default',
        fee_name=billing_type.name or DEFAULT_FEE_NAME,
        amount=billing_type.amount or Decimal('0.00'),
        frequency=billing_type.frequency or '',
        term=billing_type.term,
        year=billing_type.year,
        description=billing_type.description or '',
        is_active=True
    )


@transaction.atomic
def rebuild_class_fee_structures(class_name, billing_types):
    """Replace a class's fee structures with copies of its billing types"""
    FeeStructure.objects.filter(class_name=class_name).delete()
    created = FeeStructure.objects.bulk_create([
        fee_structure_from_billing(billing_type, class_name) for billing_type in billing_types
    ])
    logger.info(f"Rebuilt {len(created)} fee structures for {class_name}")
    return sorted(created, key=lambda fee: fee.fee_name)
