import pytest
from django.core.cache import cache
from django.urls import reverse

from apps.core.models import Category, LayoutSettings, ModerationSettings
from apps.core.services.settings_service import ModerationConfig, get_moderation_settings
from apps.groups.services import cache_service

pytestmark = pytest.mark.django_db


class TestModerationSettings:

    def test_defaults(self):
        config = get_moderation_settings()

        assert config == ModerationConfig()
        assert config.cooldown_period_ms == 6 * 3_600_000

    def test_saving_clears_cached_snapshot(self):
        assert get_moderation_settings().cooldown_value == 6

        settings = ModerationSettings.get_solo()
        settings.cooldown_value = 2
        settings.cooldown_unit = ModerationSettings.CooldownUnit.MONTHS
        settings.save()

        config = get_moderation_settings()
        assert config.cooldown_value == 2
        assert config.cooldown_unit == 'months'
        assert config.cooldown_period_ms == 2 * 30 * 24 * 3_600_000

    def test_get_is_public(self, api_client):
        response = api_client.get(reverse('core-api:moderation-settings'))
        assert response.status_code == 200
        assert response.data['groups_per_page'] == 20

    def test_put_needs_admin_key(self, api_client):
        response = api_client.put(reverse('core-api:moderation-settings'), {'groups_per_page': 5}, format='json')
        assert response.status_code == 403

    def test_put_updates_and_invalidates_listings(self, admin_client):
        before = cache_service.listing_key({'page': '1'})

        response = admin_client.put(
            reverse('core-api:moderation-settings'), {'groups_per_page': 5}, format='json'
        )

        assert response.status_code == 200
        assert ModerationSettings.get_solo().groups_per_page == 5
        assert get_moderation_settings().groups_per_page == 5
        assert cache_service.listing_key({'page': '1'}) != before

    @pytest.mark.parametrize('payload', [
        {'groups_per_page': 0},
        {'groups_per_page': 101},
        {'cooldown_unit': 'weeks'},
    ])
    def test_put_validation(self, admin_client, payload):
        response = admin_client.put(reverse('core-api:moderation-settings'), payload, format='json')
        assert response.status_code == 400


def test_layout_settings(api_client, admin_client):
    url = reverse('core-api:layout-settings')
    payload = {
        'logo_url': 'https://cdn.example.com/logo.svg',
        'nav_links': [{'label': 'Home', 'href': '/'}],
        'footer_content': 'All rights reserved.',
    }

    assert admin_client.put(url, payload, format='json').status_code == 200
    assert LayoutSettings.get_solo().nav_links == [{'label': 'Home', 'href': '/'}]
    assert cache.get('layout_settings') is None
    assert api_client.get(url).data['footer_content'] == 'All rights reserved.'


class TestTaxonomy:

    def test_list(self, api_client, taxonomy):
        response = api_client.get(reverse('core-api:taxonomy-list', args=['categories']))
        assert [item['value'] for item in response.data] == ['education', 'gaming']

    def test_unknown_kind(self, api_client):
        assert api_client.get(reverse('core-api:taxonomy-list', args=['planets'])).status_code == 404

    def test_create_normalizes_value(self, admin_client):
        response = admin_client.post(
            reverse('core-api:taxonomy-list', args=['categories']),
            {'value': ' Sports ', 'label': 'Sports'}, format='json'
        )

        assert response.status_code == 201
        assert Category.objects.filter(value='sports').exists()

    def test_create_needs_admin_key(self, api_client):
        response = api_client.post(
            reverse('core-api:taxonomy-list', args=['countries']), {'value': 'peru', 'label': 'Peru'}, format='json'
        )
        assert response.status_code == 403

    def test_delete(self, admin_client, taxonomy):
        url = reverse('core-api:taxonomy-item', args=['categories', 'gaming'])

        assert admin_client.delete(url).status_code == 200
        assert admin_client.delete(url).status_code == 404
