# apps/groups/services/s3_uploader.py

import logging
import uuid

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError
from django.conf import settings

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'jpeg': 'image/jpeg',
    'jpg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
}


def _s3_client():
    return boto3.client(
        's3',
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION_NAME
    )


def upload_image(file_obj, file_type='jpeg', folder='groups'):
    """
    Stores an image in the media bucket and returns its public URL,
    or None when the upload fails.
    """
    file_type = file_type.lower()
    if file_type not in CONTENT_TYPES:
        raise ValueError(f"Invalid file type '{file_type}'. Must be one of {sorted(CONTENT_TYPES)}.")

    object_name = f"{folder}/{uuid.uuid4()}.{file_type}"

    try:
        _s3_client().put_object(
            Body=file_obj,
            Bucket=settings.AWS_STORAGE_BUCKET_NAME,
            Key=object_name,
            ContentType=CONTENT_TYPES[file_type],
            CacheControl='max-age=86400',
        )
    except NoCredentialsError:
        logger.error("AWS credentials not available, cannot upload %s", object_name)
        return None
    except (BotoCoreError, ClientError):
        logger.exception("S3 upload failed for %s", object_name)
        return None

    return f"https://{settings.AWS_S3_CUSTOM_DOMAIN}/{object_name}"
