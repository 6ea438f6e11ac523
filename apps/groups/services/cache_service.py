# apps/groups/services/cache_service.py

import hashlib
import logging

from django.core.cache import cache

logger = logging.getLogger(__name__)

PAGE_CACHE_TIMEOUT_SECONDS = 600

# Public listings vary by filters and page, so they are grouped under a
# version number; bumping the version orphans every cached variant.
LISTING_VERSION_KEY = 'entries:listing_version'
ADMIN_LISTING_VERSION_KEY = 'entries:admin_listing_version'
DETAIL_KEY = 'entries:detail:{entry_id}'


def _version(version_key):
    version = cache.get(version_key)
    if version is None:
        cache.add(version_key, 1, timeout=None)
        version = cache.get(version_key, 1)
    return version


def _bump(version_key):
    try:
        cache.incr(version_key)
    except ValueError:
        # Key missing or evicted: any fresh version will do.
        cache.set(version_key, 1, timeout=None)


def listing_key(params, admin=False):
    version_key = ADMIN_LISTING_VERSION_KEY if admin else LISTING_VERSION_KEY
    fingerprint = hashlib.md5(repr(sorted(params.items())).encode()).hexdigest()
    prefix = 'admin_listing' if admin else 'listing'
    return f"entries:{prefix}:v{_version(version_key)}:{fingerprint}"


def detail_key(entry_id):
    return DETAIL_KEY.format(entry_id=entry_id)


def get_cached(key):
    return cache.get(key)


def set_cached(key, value):
    cache.set(key, value, timeout=PAGE_CACHE_TIMEOUT_SECONDS)


def invalidate_entry_pages(entry_id=None, include_admin=False):
    """
    Drops cached pages that list or show entries: every public listing,
    the entry's own detail page and, for admin writes, the admin listing.
    """
    _bump(LISTING_VERSION_KEY)
    if entry_id:
        cache.delete(detail_key(entry_id))
    if include_admin:
        _bump(ADMIN_LISTING_VERSION_KEY)
    logger.debug("Invalidated entry pages (entry=%s, admin=%s)", entry_id, include_admin)


def invalidate_entry_detail(entry_id):
    """
    Drops only the entry's detail page. Click counts in the listings are
    allowed to lag by up to PAGE_CACHE_TIMEOUT_SECONDS.
    """
    cache.delete(detail_key(entry_id))
