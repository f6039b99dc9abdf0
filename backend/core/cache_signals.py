"""
Drop cached data when the rows behind it change.

Invalidation runs on commit so a concurrent reader cannot refill the cache
from rows that are about to change.
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .cache_utils import invalidate_dashboard_cache, invalidate_school_settings_cache

logger = logging.getLogger(__name__)

# model name -> what to drop when one of its rows is written or deleted
INVALIDATORS = {
    'SchoolSettings': invalidate_school_settings_cache,
    'Student': invalidate_dashboard_cache,
    'Staff': invalidate_dashboard_cache,
    'FinancialRecord': invalidate_dashboard_cache,
    'ClinicRecord': invalidate_dashboard_cache,
    'Attendance': invalidate_dashboard_cache,
}


@receiver([post_save, post_delete], dispatch_uid='core.drop_stale_cache')
def drop_stale_cache(sender, instance, **kwargs):
    invalidate = INVALIDATORS.get(sender.__name__)
    if invalidate is None or kwargs.get('raw'):
        return
    logger.debug(f"{sender.__name__} {instance.pk} changed, scheduling {invalidate.__name__}")
    transaction.on_commit(invalidate)
