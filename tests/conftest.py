import copy
import threading
from unittest import mock

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from apps.core.models import Category, Country
from apps.core.services.settings_service import ModerationConfig
from apps.groups.exceptions import EntryAlreadyExists, EntryChanged, EntryNotFound
from apps.groups.services import dynamodb_handler

ADMIN_KEY = 'test-admin-key'


class InMemoryEntryStore:
    """
    Stand-in for dynamodb_handler.EntryStore with the same conditional
    write semantics, backed by a dict.
    """

    def __init__(self):
        self.items = {}
        self.lock = threading.Lock()

    def get_entry(self, entry_id):
        with self.lock:
            item = self.items.get(entry_id)
            return copy.deepcopy(item) if item is not None else None

    def create_entry(self, item):
        with self.lock:
            if item['id'] in self.items:
                raise EntryAlreadyExists(item['id'])
            self.items[item['id']] = copy.deepcopy(item)
            return copy.deepcopy(item)

    def bump_entry(self, entry_id, fields, submitted_at, previous_submitted_at):
        with self.lock:
            item = self.items.get(entry_id)
            if item is None or item.get('lastSubmittedAt') != previous_submitted_at:
                raise EntryChanged(entry_id)
            item.update(copy.deepcopy(fields))
            item['lastSubmittedAt'] = submitted_at
            item['submissionCount'] = item.get('submissionCount', 0) + 1
            return copy.deepcopy(item)

    def update_entry(self, entry_id, fields):
        with self.lock:
            if entry_id not in self.items:
                raise EntryNotFound(entry_id)
            self.items[entry_id].update(copy.deepcopy(fields))
            return copy.deepcopy(self.items[entry_id])

    def add_rating(self, entry_id, rating):
        with self.lock:
            if entry_id not in self.items:
                raise EntryNotFound(entry_id)
            item = self.items[entry_id]
            item['totalRating'] = item.get('totalRating', 0) + rating
            item['ratingCount'] = item.get('ratingCount', 0) + 1
            return item['totalRating'], item['ratingCount']

    def increment_clicks(self, entry_id):
        with self.lock:
            if entry_id not in self.items:
                raise EntryNotFound(entry_id)
            item = self.items[entry_id]
            item['clicks'] = item.get('clicks', 0) + 1
            return item['clicks']

    def delete_entry(self, entry_id):
        with self.lock:
            if entry_id not in self.items:
                raise EntryNotFound(entry_id)
            return self.items.pop(entry_id)

    def scan_page(self, limit, start_key=None):
        with self.lock:
            ids = list(self.items)
        start = ids.index(start_key['id']) + 1 if start_key else 0
        page = ids[start:start + limit]
        last_key = {'id': page[-1]} if start + limit < len(ids) else None
        return [self.get_entry(entry_id) for entry_id in page], last_key

    def list_entries(self, category=None, country=None, tag=None, entry_type=None, featured=None):
        with self.lock:
            items = copy.deepcopy(list(self.items.values()))
        return [
            item for item in items
            if (not category or item.get('category') == category)
            and (not country or item.get('country') == country)
            and (not tag or tag in item.get('tags', []))
            and (not entry_type or item.get('type') == entry_type)
            and (featured is None or item.get('featured') == featured)
        ]


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def entry_store(monkeypatch):
    store = InMemoryEntryStore()
    monkeypatch.setattr(dynamodb_handler, 'get_entry_store', lambda: store)
    return store


@pytest.fixture(autouse=True)
def preview_task():
    """Keeps submissions from reaching the Celery broker."""
    with mock.patch('apps.groups.services.submission_service.generate_entry_preview') as task:
        yield task


@pytest.fixture
def taxonomy(db):
    Category.objects.create(value='education', label='Education')
    Category.objects.create(value='gaming', label='Gaming')
    Country.objects.create(value='kenya', label='Kenya')
    Country.objects.create(value='brazil', label='Brazil')


@pytest.fixture
def config():
    return ModerationConfig(cooldown_enabled=True, cooldown_value=6, cooldown_unit='hours')


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client():
    client = APIClient()
    client.credentials(HTTP_X_ADMIN_API_KEY=ADMIN_KEY)
    return client


@pytest.fixture
def submission_payload():
    return {
        'link': 'https://chat.whatsapp.com/AbCdEfGhIjK',
        'title': 'Python Learners',
        'description': 'A friendly group for people learning Python together.',
        'category': 'education',
        'country': 'kenya',
        'type': 'group',
        'tags': 'python, coding, c, python, #learn!',
    }


@pytest.fixture
def make_entry(entry_store):
    """Puts an entry straight into the store, bypassing submission."""
    def _make(entry_id='entry-1', **overrides):
        item = {
            'id': entry_id,
            'link': f'https://chat.whatsapp.com/{entry_id}',
            'type': 'group',
            'title': 'Existing Group',
            'description': 'An entry that was already listed before the test.',
            'imageUrl': 'https://example.com/image.png',
            'imageHint': 'group preview',
            'category': 'education',
            'country': 'kenya',
            'tags': ['python'],
            'clicks': 0,
            'submissionCount': 1,
            'totalRating': 0,
            'ratingCount': 0,
            'featured': False,
            'createdAt': '2026-01-01T00:00:00+00:00',
            'lastSubmittedAt': '2026-01-01T00:00:00+00:00',
        }
        item.update(overrides)
        entry_store.items[entry_id] = item
        return item
    return _make
