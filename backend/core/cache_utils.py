"""
Query caching

Entries live in Redis when REDIS_URL is set and in the local memory cache
otherwise. Every key is "<prefix>:<digest of the call arguments>", so all the
results cached under one prefix can be dropped together.
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

SCHOOL_SETTINGS_CACHE_TTL = 600  # 10 minutes
DASHBOARD_CACHE_TTL = 300  # 5 minutes

SCHOOL_SETTINGS_CACHE_KEY = 'school_settings'
DASHBOARD_KEY_PREFIX = 'dashboard_stats'


def make_cache_key(prefix, *args, **kwargs):
    call = repr((args, sorted(kwargs.items())))
    return f"{prefix}:{hashlib.md5(call.encode()).hexdigest()}"


def _index_key(prefix):
    return f"{prefix}:_keys"


def _remember(prefix, key):
    """Track keys per prefix for backends without pattern deletes"""
    known = cache.get(_index_key(prefix)) or set()
    if key not in known:
        known.add(key)
        cache.set(_index_key(prefix), known, None)


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Cache what a function returns, once per distinct set of arguments.
    None results are never cached.

        @cached_query(cache_ttl=DASHBOARD_CACHE_TTL, key_prefix=DASHBOARD_KEY_PREFIX)
        def get_dashboard_stats(term, year, today):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            key = make_cache_key(key_prefix, *args, **kwargs)
            hit = cache.get(key)
            if hit is not None:
                logger.debug(f"{func.__name__}: served from cache ({key})")
                return hit

            fresh = func(*args, **kwargs)
            if fresh is not None:
                cache.set(key, fresh, cache_ttl)
                _remember(key_prefix, key)
            return fresh
        return wrapper
    return decorator


def invalidate_prefix(prefix):
    """Drop every cached result stored under prefix"""
    if hasattr(cache, 'delete_pattern'):
        # django-redis applies KEY_PREFIX and scans for us
        dropped = cache.delete_pattern(f"{prefix}:*")
    else:
        known = cache.get(_index_key(prefix)) or set()
        cache.delete_many(list(known))
        cache.delete(_index_key(prefix))
        dropped = len(known)
    logger.info(f"Dropped {dropped} cached entries under '{prefix}'")
    return dropped


def get_cached_school_settings():
    """Serialized settings, or None when nothing is cached"""
    return cache.get(SCHOOL_SETTINGS_CACHE_KEY)


def cache_school_settings(data, ttl=SCHOOL_SETTINGS_CACHE_TTL):
    cache.set(SCHOOL_SETTINGS_CACHE_KEY, data, ttl)


def invalidate_school_settings_cache():
    cache.delete(SCHOOL_SETTINGS_CACHE_KEY)
    logger.info("School settings cache cleared")


def invalidate_dashboard_cache():
    return invalidate_prefix(DASHBOARD_KEY_PREFIX)
