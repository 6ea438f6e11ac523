# apps/groups/services/submission_service.py

import logging
import math

from botocore.exceptions import BotoCoreError
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.core.services.results import OperationResult
from apps.core.services.settings_service import ModerationConfig, HOUR_MS
from . import cache_service, dynamodb_handler
from .links import entry_id_for_link, normalize_link
from .tags import sanitize_tags
from ..api.serializers import EntrySubmissionSerializer
from ..exceptions import (
    CooldownActive,
    EntryAlreadyExists,
    EntryChanged,
    EntryNotFound,
    StoreError,
)
from ..tasks import generate_entry_preview

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_HINT = 'group preview'


def remaining_cooldown_hours(last_submitted_at, config: ModerationConfig, now) -> int:
    """
    Whole hours left before a link last submitted at last_submitted_at may
    be submitted again, or 0 when it is eligible now.
    """
    if not config.cooldown_enabled or not last_submitted_at:
        return 0

    last = parse_datetime(last_submitted_at) if isinstance(last_submitted_at, str) else last_submitted_at
    if last is None:
        return 0

    elapsed_ms = (now - last).total_seconds() * 1000
    period_ms = config.cooldown_period_ms
    if elapsed_ms >= period_ms:
        return 0
    return math.ceil((period_ms - elapsed_ms) / HOUR_MS)


def _content_fields(data):
    """Fields a resubmission or an admin edit may change; link and type stay fixed."""
    fields = {
        'title': data['title'],
        'description': data['description'],
        'category': data['category'],
        'country': data['country'],
        'tags': sanitize_tags(data.get('tags')),
    }
    if data.get('imageUrl'):
        fields['imageUrl'] = data['imageUrl']
    if data.get('imageHint'):
        fields['imageHint'] = data['imageHint']
    return fields


def _new_entry(entry_id, data, fields, now_iso):
    return {
        'id': entry_id,
        'link': normalize_link(data['link']),
        'type': data['type'],
        **fields,
        'imageUrl': fields.get('imageUrl') or settings.PLACEHOLDER_IMAGE_URL,
        'imageHint': fields.get('imageHint') or DEFAULT_IMAGE_HINT,
        'clicks': 0,
        'submissionCount': 1,
        'totalRating': 0,
        'ratingCount': 0,
        'featured': False,
        'createdAt': now_iso,
        'lastSubmittedAt': now_iso,
    }


def _resubmit(store, existing, fields, config, now):
    """
    Bumps an existing entry if its cooldown has passed. If another request
    bumps it between our read and write, the decision is made once more
    against the fresh record.
    """
    entry_id = existing['id']
    for attempt in range(2):
        remaining = remaining_cooldown_hours(existing.get('lastSubmittedAt'), config, now)
        if remaining:
            raise CooldownActive(remaining)
        try:
            return store.bump_entry(
                entry_id,
                fields,
                submitted_at=now.isoformat(),
                previous_submitted_at=existing.get('lastSubmittedAt'),
            )
        except EntryChanged:
            if attempt:
                raise
            logger.info("Entry %s changed during resubmission, re-reading.", entry_id)
            existing = store.get_entry(entry_id)
            if existing is None:
                raise EntryNotFound(entry_id)


def _queue_preview_image(entry_id):
    try:
        generate_entry_preview.delay(entry_id)
    except Exception:
        # The placeholder image stays; the submission itself succeeded.
        logger.warning("Could not queue preview image for entry %s", entry_id, exc_info=True)


def _submit_public(store, data, fields, config, now):
    entry_id = entry_id_for_link(data['link'])
    existing = store.get_entry(entry_id)

    if existing is None:
        try:
            entry = store.create_entry(_new_entry(entry_id, data, fields, now.isoformat()))
        except EntryAlreadyExists:
            logger.info("Entry %s was created concurrently, treating as resubmission.", entry_id)
            existing = store.get_entry(entry_id)
            if existing is None:
                raise EntryChanged(entry_id)
        else:
            if 'imageUrl' not in fields:
                _queue_preview_image(entry_id)
            return entry, True

    return _resubmit(store, existing, fields, config, now), False


def _apply_admin_edit(store, group_id, fields):
    fields = {
        **fields,
        'imageUrl': fields.get('imageUrl') or settings.PLACEHOLDER_IMAGE_URL,
        'updatedAt': timezone.now().isoformat(),
    }
    # An edit that leaves imageHint out keeps the stored one.
    return store.update_entry(group_id, fields)


def submit(payload, config: ModerationConfig, store=None, now=None, is_admin=False) -> OperationResult:
    """
    Validates a submission and applies it.

    * groupId present (admin only): edit the entry's content in place.
    * link already listed: resubmission, subject to the cooldown; on
      success the entry is bumped (content refreshed, submissionCount + 1,
      lastSubmittedAt = now).
    * otherwise: a new entry is created.

    Never raises; every outcome is an OperationResult.
    """
    serializer = EntrySubmissionSerializer(data=payload)
    if not serializer.is_valid():
        return OperationResult.fail(
            'validation',
            'Validation failed. Please check your input.',
            errors=serializer.errors
        )

    data = serializer.validated_data
    group_id = data.get('groupId')
    if group_id and not is_admin:
        return OperationResult.fail('forbidden', 'You are not allowed to edit this group.')

    store = store or dynamodb_handler.get_entry_store()
    now = now or timezone.now()
    fields = _content_fields(data)

    try:
        if group_id:
            entry = _apply_admin_edit(store, group_id, fields)
            cache_service.invalidate_entry_pages(entry['id'], include_admin=True)
            return OperationResult.ok('Group updated successfully!', entry_id=entry['id'], entry=entry)

        entry, created = _submit_public(store, data, fields, config, now)

    except CooldownActive as e:
        return OperationResult.fail('cooldown', str(e))
    except EntryNotFound:
        return OperationResult.fail('not_found', 'Group not found.')
    except (StoreError, EntryChanged, BotoCoreError):
        logger.exception("Submission processing failed for %s", data.get('link'))
        return OperationResult.fail('store_error', 'Failed to submit group. Please try again.')

    cache_service.invalidate_entry_pages(entry['id'])
    if created:
        logger.info("New entry %s submitted", entry['id'])
        return OperationResult.ok('Group submitted successfully!', entry_id=entry['id'], entry=entry, created=True)

    logger.info("Entry %s bumped (submission #%s)", entry['id'], entry.get('submissionCount'))
    return OperationResult.ok(
        'This group was already listed and has been bumped to the top!',
        entry_id=entry['id'], entry=entry, created=False
    )
