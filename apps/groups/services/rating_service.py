# apps/groups/services/rating_service.py

import json
import logging

from botocore.exceptions import BotoCoreError
from django.core import signing

from apps.core.services.results import OperationResult
from . import cache_service, dynamodb_handler
from ..exceptions import AlreadyRated, EntryNotFound, StoreError

logger = logging.getLogger(__name__)

COOKIE_NAME = 'rated_groups'
COOKIE_SALT = 'linkhub.rated_groups'
COOKIE_MAX_AGE = 365 * 24 * 60 * 60  # One year in seconds
# Keeps the signed cookie well under the 4 KB browser limit.
MAX_RATED_IDS = 50
MIN_RATING, MAX_RATING = 1, 5


def get_rated_ids(request) -> list[str]:
    """
    Entry ids this browser has already rated, read from the signed cookie.
    A missing, tampered or malformed cookie counts as nothing rated.
    """
    try:
        raw = request.get_signed_cookie(COOKIE_NAME, salt=COOKIE_SALT, max_age=COOKIE_MAX_AGE)
    except (KeyError, signing.BadSignature):
        return []

    try:
        rated = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(rated, list):
        return []
    return [str(entry_id) for entry_id in rated]


def set_rated_cookie(response, rated_ids):
    """
    Attaches the rated-groups cookie to the HTTP response. Only the
    MAX_RATED_IDS most recent ids are kept.
    """
    response.set_signed_cookie(
        COOKIE_NAME,
        json.dumps(list(rated_ids)[-MAX_RATED_IDS:]),
        salt=COOKIE_SALT,
        max_age=COOKIE_MAX_AGE,
        httponly=True,
        samesite='Lax',
    )


def submit_rating(group_id, rating: int, rated_ids, store=None) -> OperationResult:
    """
    Adds a 1-5 rating to an entry. The browser's rated set (rated_ids) is
    checked first; the counters are then changed in one atomic update, so
    simultaneous raters never overwrite each other.

    On success the result carries averageRating and the rated set with
    group_id appended; the caller persists that set in the cookie.
    """
    try:
        rating = int(rating)
    except (TypeError, ValueError):
        rating = None
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        return OperationResult.fail(
            'validation',
            'Rating must be a whole number from 1 to 5.',
            errors={'rating': ['Rating must be a whole number from 1 to 5.']}
        )

    store = store or dynamodb_handler.get_entry_store()
    try:
        if group_id in rated_ids:
            raise AlreadyRated()
        total, count = store.add_rating(group_id, rating)
    except AlreadyRated as e:
        return OperationResult.fail('already_rated', str(e))
    except EntryNotFound:
        return OperationResult.fail('not_found', 'Group not found.')
    except (StoreError, BotoCoreError):
        logger.exception("Rating failed for entry %s", group_id)
        return OperationResult.fail('store_error', 'Failed to submit rating. Please try again.')

    cache_service.invalidate_entry_pages(group_id)
    average = round(total / count, 2)
    logger.info("Entry %s rated %s (average now %s over %s)", group_id, rating, average, count)
    return OperationResult.ok(
        'Thank you for your rating!',
        averageRating=average,
        totalRating=total,
        ratingCount=count,
        rated_ids=[*rated_ids, group_id],
    )


def record_click(group_id, store=None) -> OperationResult:
    """Counts one visit to the entry's invite link."""
    store = store or dynamodb_handler.get_entry_store()
    try:
        clicks = store.increment_clicks(group_id)
    except EntryNotFound:
        return OperationResult.fail('not_found', 'Group not found.')
    except (StoreError, BotoCoreError):
        logger.exception("Click tracking failed for entry %s", group_id)
        return OperationResult.fail('store_error', 'Failed to record click.')

    cache_service.invalidate_entry_detail(group_id)
    return OperationResult.ok('Click recorded.', clicks=clicks)
