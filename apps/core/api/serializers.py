# apps/core/api/serializers.py

from rest_framework import serializers
from ..models import ModerationSettings, LayoutSettings, Category, Country


class ModerationSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = ModerationSettings
        fields = [
            'cooldown_enabled',
            'cooldown_value',
            'cooldown_unit',
            'groups_per_page',
            'featured_groups_display',
            'show_newsletter',
            'show_dynamic_seo_content',
            'show_ratings',
            'show_clicks',
        ]


class NavLinkSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=50)
    href = serializers.CharField(max_length=1024)


class LayoutSettingsSerializer(serializers.ModelSerializer):
    nav_links = NavLinkSerializer(many=True, required=False)

    class Meta:
        model = LayoutSettings
        fields = [
            'logo_url',
            'nav_links',
            'footer_content',
            'background_settings',
            'homepage_seo_content',
            'seo_settings',
        ]

    def update(self, instance, validated_data):
        # nav_links is a JSON column, store the validated dicts as-is.
        if 'nav_links' in validated_data:
            validated_data['nav_links'] = [dict(link) for link in validated_data['nav_links']]
        return super().update(instance, validated_data)


class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['value', 'label']


class CountrySerializer(serializers.ModelSerializer):
    class Meta:
        model = Country
        fields = ['value', 'label']
