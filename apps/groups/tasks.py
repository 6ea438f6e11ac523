# apps/groups/tasks.py

import logging

from botocore.exceptions import BotoCoreError
from celery import shared_task
from django.conf import settings

from .exceptions import EntryServiceError
from .services import cache_service, dynamodb_handler, s3_uploader
from .services.preview_image import create_preview_image, PreviewImageError

logger = logging.getLogger(__name__)

GENERATED_IMAGE_HINT = 'generated preview'


@shared_task
def generate_entry_preview(entry_id):
    """
    Renders a preview card for an entry that was submitted without an
    image, uploads it and points the entry's imageUrl at it.
    """
    store = dynamodb_handler.get_entry_store()
    try:
        entry = store.get_entry(entry_id)
    except (EntryServiceError, BotoCoreError):
        logger.exception("Could not load entry %s for preview generation", entry_id)
        return None

    if entry is None:
        logger.warning("Entry %s not found, skipping preview generation.", entry_id)
        return None

    # Someone set a real image in the meantime (admin edit or resubmission).
    if entry.get('imageUrl') and entry['imageUrl'] != settings.PLACEHOLDER_IMAGE_URL:
        logger.info("Entry %s already has an image, skipping.", entry_id)
        return entry['imageUrl']

    try:
        image_file = create_preview_image(entry['title'], entry.get('description', ''))
    except PreviewImageError:
        logger.exception("Preview rendering failed for entry %s", entry_id)
        return None

    image_url = s3_uploader.upload_image(image_file, file_type='png', folder='previews')
    if not image_url:
        logger.error("Preview upload failed for entry %s", entry_id)
        return None

    try:
        store.update_entry(entry_id, {'imageUrl': image_url, 'imageHint': GENERATED_IMAGE_HINT})
    except (EntryServiceError, BotoCoreError):
        logger.exception("Could not save preview image for entry %s", entry_id)
        return None

    cache_service.invalidate_entry_pages(entry_id)
    logger.info("Generated preview image for entry %s", entry_id)
    return image_url
