# apps/groups/api/serializers.py

from rest_framework import serializers

from apps.core.models import Category, Country
from ..services.links import ENTRY_TYPES, is_invite_link


class EntrySubmissionSerializer(serializers.Serializer):
    """
    Shared schema for public submissions and admin edits. groupId is only
    honoured for admin callers, see submission_service.submit().
    """
    link = serializers.URLField(
        max_length=1024,
        error_messages={'invalid': 'Please enter a valid URL.'}
    )
    title = serializers.CharField(
        min_length=5, max_length=150,
        error_messages={'min_length': 'Title must be at least 5 characters.'}
    )
    description = serializers.CharField(
        min_length=20, max_length=2000,
        error_messages={'min_length': 'Description must be at least 20 characters.'}
    )
    category = serializers.CharField(
        max_length=50,
        error_messages={'blank': 'Please select a category.', 'required': 'Please select a category.'}
    )
    country = serializers.CharField(
        max_length=50,
        error_messages={'blank': 'Please select a country.', 'required': 'Please select a country.'}
    )
    type = serializers.ChoiceField(
        choices=ENTRY_TYPES,
        error_messages={'required': 'Please select a type.'}
    )
    tags = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)
    imageUrl = serializers.URLField(required=False, allow_blank=True, allow_null=True, max_length=1024)
    imageHint = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    groupId = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=64)

    def validate_category(self, value):
        if not Category.objects.filter(value=value).exists():
            raise serializers.ValidationError('Please select a valid category.')
        return value

    def validate_country(self, value):
        if not Country.objects.filter(value=value).exists():
            raise serializers.ValidationError('Please select a valid country.')
        return value

    def validate(self, data):
        if not is_invite_link(data['link'], data['type']):
            raise serializers.ValidationError(
                {'link': ['Please enter a valid WhatsApp Group or Channel link.']}
            )
        return data


class RatingSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)


class LinkPreviewRequestSerializer(serializers.Serializer):
    link = serializers.URLField(max_length=1024)


class FeaturedSerializer(serializers.Serializer):
    featured = serializers.BooleanField()


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()


class EntrySerializer(serializers.Serializer):
    """
    Public representation of an entry dict from the store. Counters are
    hidden when the moderation settings switch them off.
    """
    id = serializers.CharField()
    link = serializers.CharField()
    type = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    imageUrl = serializers.CharField(allow_blank=True, default='')
    imageHint = serializers.CharField(allow_blank=True, default='')
    category = serializers.CharField()
    country = serializers.CharField()
    tags = serializers.ListField(child=serializers.CharField(), default=list)
    featured = serializers.BooleanField(default=False)
    clicks = serializers.IntegerField(default=0)
    submissionCount = serializers.IntegerField(default=1)
    totalRating = serializers.IntegerField(default=0)
    ratingCount = serializers.IntegerField(default=0)
    averageRating = serializers.SerializerMethodField()
    createdAt = serializers.CharField(allow_null=True, default=None)
    lastSubmittedAt = serializers.CharField(allow_null=True, default=None)

    def get_averageRating(self, entry):
        return average_rating(entry.get('totalRating', 0), entry.get('ratingCount', 0))

    def to_representation(self, instance):
        data = super().to_representation(instance)
        config = self.context.get('moderation')
        if config is not None and not config.show_clicks:
            data.pop('clicks')
        if config is not None and not config.show_ratings:
            for key in ('totalRating', 'ratingCount', 'averageRating'):
                data.pop(key)
        return data


def average_rating(total, count):
    if not count:
        return None
    return round(total / count, 2)
