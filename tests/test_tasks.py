from unittest import mock

import pytest
from PIL import Image

from apps.groups.services.preview_image import (
    InvalidParameterError,
    PreviewCardGenerator,
    create_preview_image,
)
from apps.groups.tasks import GENERATED_IMAGE_HINT, generate_entry_preview

UPLOADED_URL = 'https://linkhub-media.s3.amazonaws.com/previews/card.png'


def test_preview_card_is_a_png_of_the_right_size():
    buffer = create_preview_image('Python Learners', 'A friendly group ' * 40)
    image = Image.open(buffer)

    assert image.format == 'PNG'
    assert image.size == (PreviewCardGenerator.WIDTH, PreviewCardGenerator.HEIGHT)


def test_preview_card_needs_a_title():
    with pytest.raises(InvalidParameterError):
        create_preview_image('   ', 'description')


@mock.patch('apps.groups.tasks.s3_uploader.upload_image', return_value=UPLOADED_URL)
def test_task_sets_generated_image(mock_upload, make_entry, entry_store, settings):
    make_entry('entry-1', imageUrl=settings.PLACEHOLDER_IMAGE_URL)

    assert generate_entry_preview('entry-1') == UPLOADED_URL

    entry = entry_store.get_entry('entry-1')
    assert entry['imageUrl'] == UPLOADED_URL
    assert entry['imageHint'] == GENERATED_IMAGE_HINT
    assert mock_upload.call_args.kwargs == {'file_type': 'png', 'folder': 'previews'}


@mock.patch('apps.groups.tasks.s3_uploader.upload_image')
def test_task_keeps_real_image(mock_upload, make_entry):
    make_entry('entry-1', imageUrl='https://cdn.example.com/own.png')

    assert generate_entry_preview('entry-1') == 'https://cdn.example.com/own.png'
    mock_upload.assert_not_called()


@mock.patch('apps.groups.tasks.s3_uploader.upload_image', return_value=None)
def test_failed_upload_leaves_placeholder(mock_upload, make_entry, entry_store, settings):
    make_entry('entry-1', imageUrl=settings.PLACEHOLDER_IMAGE_URL)

    assert generate_entry_preview('entry-1') is None
    assert entry_store.get_entry('entry-1')['imageUrl'] == settings.PLACEHOLDER_IMAGE_URL


def test_task_for_deleted_entry(entry_store):
    assert generate_entry_preview('missing') is None
