# apps/core/api/views.py

import logging

from django.http import Http404
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response

from ..models import ModerationSettings, LayoutSettings, Category, Country
from ..services.settings_service import get_layout_settings
from .permissions import ReadOnlyOrAdminAPIKey, HasAdminAPIKey
from .serializers import (
    ModerationSettingsSerializer,
    LayoutSettingsSerializer,
    CategorySerializer,
    CountrySerializer,
)
from apps.groups.services import cache_service

logger = logging.getLogger(__name__)

TAXONOMIES = {
    'categories': (Category, CategorySerializer),
    'countries': (Country, CountrySerializer),
}


def _get_taxonomy(kind):
    try:
        return TAXONOMIES[kind]
    except KeyError:
        raise Http404(f"Unknown taxonomy '{kind}'.")


class ModerationSettingsView(APIView):
    """
    GET returns the moderation settings; PUT (admin) updates any subset of them.
    """
    permission_classes = [ReadOnlyOrAdminAPIKey]

    def get(self, request, *args, **kwargs):
        serializer = ModerationSettingsSerializer(ModerationSettings.get_solo())
        return Response(serializer.data, status=status.HTTP_200_OK)

    def put(self, request, *args, **kwargs):
        serializer = ModerationSettingsSerializer(
            ModerationSettings.get_solo(), data=request.data, partial=True
        )
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        serializer.save()
        # Page size and visibility flags change what the listings contain.
        cache_service.invalidate_entry_pages(include_admin=True)
        return Response(
            {"message": "Moderation settings saved successfully.", "settings": serializer.data},
            status=status.HTTP_200_OK
        )


class LayoutSettingsView(APIView):
    permission_classes = [ReadOnlyOrAdminAPIKey]

    def get(self, request, *args, **kwargs):
        serializer = LayoutSettingsSerializer(get_layout_settings())
        return Response(serializer.data, status=status.HTTP_200_OK)

    def put(self, request, *args, **kwargs):
        serializer = LayoutSettingsSerializer(
            LayoutSettings.get_solo(), data=request.data, partial=True
        )
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        serializer.save()
        return Response(
            {"message": "Layout settings saved successfully.", "settings": serializer.data},
            status=status.HTTP_200_OK
        )


class TaxonomyListView(APIView):
    """
    GET lists a taxonomy (categories or countries).
    POST (admin) creates an item, or relabels it when the value already exists.
    """
    permission_classes = [ReadOnlyOrAdminAPIKey]

    def get(self, request, kind, *args, **kwargs):
        model, serializer_class = _get_taxonomy(kind)
        serializer = serializer_class(model.objects.all(), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    def post(self, request, kind, *args, **kwargs):
        model, serializer_class = _get_taxonomy(kind)
        value = str(request.data.get('value', '')).strip().lower()
        existing = model.objects.filter(value=value).first() if value else None

        serializer = serializer_class(existing, data={**request.data, 'value': value})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        item = serializer.save()
        logger.info("Saved %s item '%s'.", kind, item.value)
        return Response(
            serializer.data,
            status=status.HTTP_200_OK if existing else status.HTTP_201_CREATED
        )


class TaxonomyItemView(APIView):
    permission_classes = [HasAdminAPIKey]

    def delete(self, request, kind, value, *args, **kwargs):
        model, _ = _get_taxonomy(kind)
        deleted, _ = model.objects.filter(value=value).delete()
        if not deleted:
            return Response({"error": "Item not found."}, status=status.HTTP_404_NOT_FOUND)

        # Entries keep the deleted value; nothing cascades.
        logger.info("Deleted %s item '%s'.", kind, value)
        return Response({"message": "Item deleted successfully."}, status=status.HTTP_200_OK)
