import threading
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.services.settings_service import ModerationConfig
from apps.groups.exceptions import StoreError
from apps.groups.services import submission_service
from apps.groups.services.links import entry_id_for_link
from apps.groups.services.submission_service import remaining_cooldown_hours, submit

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def _taxonomy(taxonomy):
    pass


def _submit(payload, config, store, **kwargs):
    return submit(payload, config, store=store, **kwargs)


class TestNewSubmission:

    def test_creates_entry_with_fresh_counters(self, entry_store, config, submission_payload):
        now = timezone.now()
        result = _submit(submission_payload, config, entry_store, now=now)

        assert result.success
        assert result.message == 'Group submitted successfully!'
        assert result.data['created'] is True

        entry = entry_store.get_entry(result.data['entry_id'])
        assert entry['submissionCount'] == 1
        assert entry['clicks'] == 0
        assert entry['totalRating'] == 0
        assert entry['ratingCount'] == 0
        assert entry['featured'] is False
        assert entry['createdAt'] == entry['lastSubmittedAt'] == now.isoformat()
        assert entry['tags'] == ['python', 'coding', 'learn']

    def test_entry_id_is_derived_from_normalized_link(self, entry_store, config, submission_payload):
        submission_payload['link'] = '  https://chat.whatsapp.com/AbCdEfGhIjK/ '
        result = _submit(submission_payload, config, entry_store)

        assert result.data['entry_id'] == entry_id_for_link('https://chat.whatsapp.com/AbCdEfGhIjK')
        assert result.data['entry']['link'] == 'https://chat.whatsapp.com/AbCdEfGhIjK'

    def test_missing_image_uses_placeholder_and_queues_preview(
        self, entry_store, config, submission_payload, preview_task, settings
    ):
        result = _submit(submission_payload, config, entry_store)

        assert result.data['entry']['imageUrl'] == settings.PLACEHOLDER_IMAGE_URL
        assert result.data['entry']['imageHint'] == 'group preview'
        preview_task.delay.assert_called_once_with(result.data['entry_id'])

    def test_given_image_is_kept_and_no_preview_is_queued(
        self, entry_store, config, submission_payload, preview_task
    ):
        submission_payload['imageUrl'] = 'https://cdn.example.com/logo.png'
        result = _submit(submission_payload, config, entry_store)

        assert result.data['entry']['imageUrl'] == 'https://cdn.example.com/logo.png'
        preview_task.delay.assert_not_called()

    def test_preview_queue_failure_does_not_fail_submission(
        self, entry_store, config, submission_payload, preview_task
    ):
        preview_task.delay.side_effect = ConnectionError("broker down")
        result = _submit(submission_payload, config, entry_store)
        assert result.success

    def test_channel_submission(self, entry_store, config, submission_payload):
        submission_payload.update(link='https://whatsapp.com/channel/0029VaExample', type='channel')
        result = _submit(submission_payload, config, entry_store)
        assert result.success
        assert result.data['entry']['type'] == 'channel'


class TestValidation:

    @pytest.mark.parametrize('field, value', [
        ('title', 'abcd'),
        ('description', 'too short'),
        ('category', 'unknown'),
        ('country', 'atlantis'),
        ('type', 'community'),
        ('link', 'not a url'),
    ])
    def test_invalid_field_is_reported_without_mutation(
        self, entry_store, config, submission_payload, field, value
    ):
        submission_payload[field] = value
        result = _submit(submission_payload, config, entry_store)

        assert not result.success
        assert result.error_code == 'validation'
        assert field in result.errors
        assert entry_store.items == {}

    def test_non_invite_link_is_rejected(self, entry_store, config, submission_payload):
        submission_payload['link'] = 'https://example.com/join/abc'
        result = _submit(submission_payload, config, entry_store)

        assert result.error_code == 'validation'
        assert result.errors['link'] == ['Please enter a valid WhatsApp Group or Channel link.']

    def test_link_prefix_must_match_type(self, entry_store, config, submission_payload):
        submission_payload['type'] = 'channel'
        result = _submit(submission_payload, config, entry_store)
        assert result.error_code == 'validation'
        assert 'link' in result.errors


class TestResubmission:

    def _seed(self, entry_store, config, payload, hours_ago):
        first = timezone.now() - timedelta(hours=hours_ago)
        result = _submit(payload, config, entry_store, now=first)
        assert result.success
        return result.data['entry_id']

    def test_within_cooldown_is_rejected_and_nothing_changes(self, entry_store, config, submission_payload):
        entry_id = self._seed(entry_store, config, submission_payload, hours_ago=3)
        before = entry_store.get_entry(entry_id)

        submission_payload['title'] = 'A Brand New Title'
        result = _submit(submission_payload, config, entry_store)

        assert not result.success
        assert result.error_code == 'cooldown'
        assert 'about 3 more hour(s)' in result.message
        assert entry_store.get_entry(entry_id) == before

    def test_after_cooldown_bumps_entry(self, entry_store, config, submission_payload):
        entry_id = self._seed(entry_store, config, submission_payload, hours_ago=7)
        entry_store.items[entry_id].update(clicks=12, totalRating=8, ratingCount=2)
        before = entry_store.get_entry(entry_id)

        now = timezone.now()
        submission_payload.update(title='A Brand New Title', tags='fresh')
        result = _submit(submission_payload, config, entry_store, now=now)

        assert result.success
        assert result.data['created'] is False
        assert result.message == 'This group was already listed and has been bumped to the top!'

        after = entry_store.get_entry(entry_id)
        assert after['submissionCount'] == before['submissionCount'] + 1
        assert after['lastSubmittedAt'] == now.isoformat()
        assert after['title'] == 'A Brand New Title'
        assert after['tags'] == ['fresh']
        for key in ('createdAt', 'clicks', 'totalRating', 'ratingCount', 'link', 'type'):
            assert after[key] == before[key]

    def test_disabled_cooldown_always_bumps(self, entry_store, submission_payload):
        config = ModerationConfig(cooldown_enabled=False)
        entry_id = self._seed(entry_store, config, submission_payload, hours_ago=0)

        result = _submit(submission_payload, config, entry_store)

        assert result.success
        assert entry_store.get_entry(entry_id)['submissionCount'] == 2

    def test_concurrent_bump_is_reevaluated(self, entry_store, config, submission_payload, monkeypatch):
        entry_id = self._seed(entry_store, config, submission_payload, hours_ago=10)
        real_get = entry_store.get_entry
        calls = []

        def get_entry_then_race(key):
            entry = real_get(key)
            if not calls:
                # Another request bumps the entry after our first read.
                entry_store.items[key]['lastSubmittedAt'] = timezone.now().isoformat()
            calls.append(key)
            return entry

        monkeypatch.setattr(entry_store, 'get_entry', get_entry_then_race)
        result = _submit(submission_payload, config, entry_store)

        assert result.error_code == 'cooldown'
        assert entry_store.items[entry_id]['submissionCount'] == 1

    def test_concurrent_first_submissions_create_one_entry(self, entry_store, submission_payload):
        config = ModerationConfig(cooldown_enabled=False)
        data = {**submission_payload, 'link': submission_payload['link'].strip()}
        fields = submission_service._content_fields(data)
        barrier = threading.Barrier(2)
        outcomes = []

        def worker():
            barrier.wait()
            outcomes.append(submission_service._submit_public(entry_store, data, fields, config, timezone.now()))

        threads = [threading.Thread(target=worker) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(created for _, created in outcomes) == [False, True]
        assert len(entry_store.items) == 1
        assert next(iter(entry_store.items.values()))['submissionCount'] == 2


class TestAdminEdit:

    def test_edit_never_touches_counters(self, entry_store, config, submission_payload, make_entry):
        entry = make_entry(
            'entry-1', clicks=40, submissionCount=3, totalRating=20, ratingCount=5
        )
        submission_payload.update(
            groupId='entry-1', title='Edited Title', link=entry['link'], tags='edited'
        )
        result = _submit(submission_payload, config, entry_store, is_admin=True)

        assert result.success
        assert result.message == 'Group updated successfully!'

        after = entry_store.get_entry('entry-1')
        assert after['title'] == 'Edited Title'
        assert after['tags'] == ['edited']
        for key in ('submissionCount', 'createdAt', 'lastSubmittedAt', 'clicks', 'totalRating', 'ratingCount'):
            assert after[key] == entry[key]
        assert 'updatedAt' in after

    def test_edit_without_image_hint_keeps_stored_hint(
            self, entry_store, config, submission_payload, make_entry):
        entry = make_entry('entry-1', imageHint='custom hint')
        submission_payload.pop('imageHint', None)
        submission_payload.update(groupId='entry-1', link=entry['link'], title='Edited Title')

        assert _submit(submission_payload, config, entry_store, is_admin=True).success

        after = entry_store.get_entry('entry-1')
        assert after['title'] == 'Edited Title'
        assert after['imageHint'] == 'custom hint'

    def test_edit_with_image_hint_replaces_it(self, entry_store, config, submission_payload, make_entry):
        entry = make_entry('entry-1', imageHint='custom hint')
        submission_payload.update(groupId='entry-1', link=entry['link'], imageHint='new hint')

        assert _submit(submission_payload, config, entry_store, is_admin=True).success
        assert entry_store.get_entry('entry-1')['imageHint'] == 'new hint'

    def test_edit_ignores_cooldown(self, entry_store, config, submission_payload, make_entry):
        make_entry('entry-1', lastSubmittedAt=timezone.now().isoformat())
        submission_payload['groupId'] = 'entry-1'
        assert _submit(submission_payload, config, entry_store, is_admin=True).success

    def test_group_id_without_admin_key_is_forbidden(self, entry_store, config, submission_payload, make_entry):
        make_entry('entry-1')
        submission_payload['groupId'] = 'entry-1'
        result = _submit(submission_payload, config, entry_store, is_admin=False)

        assert result.error_code == 'forbidden'
        assert entry_store.get_entry('entry-1')['title'] == 'Existing Group'

    def test_edit_of_missing_entry(self, entry_store, config, submission_payload):
        submission_payload['groupId'] = 'missing'
        result = _submit(submission_payload, config, entry_store, is_admin=True)
        assert result.error_code == 'not_found'


def test_store_failure_is_not_leaked(entry_store, config, submission_payload, monkeypatch):
    def broken(*args, **kwargs):
        raise StoreError("ProvisionedThroughputExceededException: table entries")

    monkeypatch.setattr(entry_store, 'get_entry', broken)
    result = _submit(submission_payload, config, entry_store)

    assert result.error_code == 'store_error'
    assert result.message == 'Failed to submit group. Please try again.'
    assert 'Provisioned' not in str(result.to_dict())


class TestRemainingCooldown:

    @pytest.mark.parametrize('unit, value, elapsed, expected', [
        ('hours', 6, timedelta(hours=3), 3),
        ('hours', 6, timedelta(hours=5, minutes=1), 1),
        ('hours', 6, timedelta(hours=6), 0),
        ('days', 1, timedelta(hours=1), 23),
        ('months', 1, timedelta(days=29), 24),
        ('months', 1, timedelta(days=30), 0),
    ])
    def test_remaining_hours(self, unit, value, elapsed, expected):
        now = timezone.now()
        config = ModerationConfig(cooldown_value=value, cooldown_unit=unit)
        assert remaining_cooldown_hours((now - elapsed).isoformat(), config, now) == expected

    def test_disabled(self):
        now = timezone.now()
        config = ModerationConfig(cooldown_enabled=False)
        assert remaining_cooldown_hours(now.isoformat(), config, now) == 0

    def test_missing_timestamp(self):
        assert remaining_cooldown_hours(None, ModerationConfig(), timezone.now()) == 0


def test_submit_uses_default_store(entry_store, config, submission_payload):
    result = submission_service.submit(submission_payload, config)
    assert result.data['entry_id'] in entry_store.items
