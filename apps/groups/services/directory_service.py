# apps/groups/services/directory_service.py

import logging

from botocore.exceptions import BotoCoreError

from apps.core.services.results import OperationResult
from . import cache_service, dynamodb_handler
from ..exceptions import EntryNotFound, StoreError

logger = logging.getLogger(__name__)

RELATED_LIMIT = 4
ADMIN_PAGE_SIZE = 25
ADMIN_MAX_PAGE_SIZE = 100


def _recency(entry):
    return entry.get('lastSubmittedAt') or entry.get('createdAt') or ''


def newest_first(entries):
    """Most recently submitted or bumped entries first."""
    return sorted(entries, key=_recency, reverse=True)


def list_entries(store=None, category=None, country=None, tag=None, entry_type=None):
    store = store or dynamodb_handler.get_entry_store()
    entries = store.list_entries(category=category, country=country, tag=tag, entry_type=entry_type)
    return newest_first(entries)


def featured_entries(store=None):
    store = store or dynamodb_handler.get_entry_store()
    return newest_first(store.list_entries(featured=True))


def related_entries(entry, store=None, limit=RELATED_LIMIT):
    """Other entries in the same category, newest first."""
    store = store or dynamodb_handler.get_entry_store()
    candidates = store.list_entries(category=entry.get('category'))
    return [e for e in newest_first(candidates) if e['id'] != entry['id']][:limit]


def admin_page(cursor=None, limit=ADMIN_PAGE_SIZE, store=None):
    """
    One page of the admin listing. cursor is the opaque next_cursor of the
    previous page; a ValueError is raised for a cursor we did not issue.
    """
    store = store or dynamodb_handler.get_entry_store()
    limit = max(1, min(int(limit), ADMIN_MAX_PAGE_SIZE))
    start_key = dynamodb_handler.decode_cursor(cursor)
    items, last_key = store.scan_page(limit, start_key)
    return {
        'results': items,
        'next_cursor': dynamodb_handler.encode_cursor(last_key),
    }


def delete_entry(group_id, store=None) -> OperationResult:
    store = store or dynamodb_handler.get_entry_store()
    try:
        store.delete_entry(group_id)
    except EntryNotFound:
        return OperationResult.fail('not_found', 'Group not found.')
    except (StoreError, BotoCoreError):
        logger.exception("Error deleting entry %s", group_id)
        return OperationResult.fail('store_error', 'Failed to delete group.')

    cache_service.invalidate_entry_pages(group_id, include_admin=True)
    return OperationResult.ok('Group deleted successfully.')


def set_featured(group_id, featured: bool, store=None) -> OperationResult:
    store = store or dynamodb_handler.get_entry_store()
    try:
        entry = store.update_entry(group_id, {'featured': featured})
    except EntryNotFound:
        return OperationResult.fail('not_found', 'Group not found.')
    except (StoreError, BotoCoreError):
        logger.exception("Error updating featured flag for entry %s", group_id)
        return OperationResult.fail('store_error', 'Failed to update group.')

    cache_service.invalidate_entry_pages(group_id, include_admin=True)
    message = 'Group is now featured.' if featured else 'Group is no longer featured.'
    return OperationResult.ok(message, entry=entry)
