# apps/groups/api/views.py

import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework.pagination import PageNumberPagination
from rest_framework.parsers import MultiPartParser, FormParser
from botocore.exceptions import BotoCoreError

from apps.core.api.permissions import HasAdminAPIKey, has_admin_api_key
from apps.core.services.settings_service import get_moderation_settings
from ..exceptions import StoreError
from ..services import (
    cache_service,
    directory_service,
    dynamodb_handler,
    link_preview,
    rating_service,
    s3_uploader,
    submission_service,
)
from .serializers import (
    EntrySerializer,
    FeaturedSerializer,
    ImageUploadSerializer,
    LinkPreviewRequestSerializer,
    RatingSerializer,
)

logger = logging.getLogger(__name__)

LISTING_FILTERS = ('category', 'country', 'tag', 'type')
STORE_FAILURE = {"error": "Could not load groups. Please try again later."}


class EntryPagination(PageNumberPagination):
    page_size = 20
    page_query_param = 'page'


def _serialize(entries, config, many=True):
    return EntrySerializer(entries, many=many, context={'moderation': config}).data


def _result_response(result, config, success_status=status.HTTP_200_OK):
    payload = result.to_dict()
    if payload.get('entry') is not None:
        payload['entry'] = _serialize(payload['entry'], config, many=False)
    return Response(payload, status=success_status if result.success else result.http_status)


class SubmitEntryView(APIView):
    """
    Public submission endpoint. Admin callers (X-Admin-API-Key) may pass
    groupId to edit an entry in place.
    """
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        config = get_moderation_settings()
        # Only edits need the key; plain submissions stay anonymous.
        is_admin = bool(request.data.get('groupId')) and has_admin_api_key(request)
        result = submission_service.submit(request.data, config, is_admin=is_admin)
        created = result.success and result.data.get('created')
        return _result_response(
            result, config,
            success_status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )


class EntryListView(APIView):
    """Public listing, newest bump first, filterable by category, country, tag and type."""
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        config = get_moderation_settings()
        filters = {key: request.query_params.get(key) or None for key in LISTING_FILTERS}
        cache_params = {**filters, 'page': request.query_params.get('page', '1')}

        key = cache_service.listing_key(cache_params)
        cached = cache_service.get_cached(key)
        if cached is not None:
            return Response(cached, status=status.HTTP_200_OK)

        try:
            entries = directory_service.list_entries(
                category=filters['category'],
                country=filters['country'],
                tag=filters['tag'],
                entry_type=filters['type'],
            )
        except (StoreError, BotoCoreError):
            logger.exception("Error listing entries")
            return Response(STORE_FAILURE, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        paginator = EntryPagination()
        paginator.page_size = config.groups_per_page
        page = paginator.paginate_queryset(entries, request, view=self)
        response = paginator.get_paginated_response(_serialize(page, config))
        cache_service.set_cached(key, response.data)
        return response


class FeaturedEntriesView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        config = get_moderation_settings()
        key = cache_service.listing_key({'featured': True})
        cached = cache_service.get_cached(key)
        if cached is not None:
            return Response(cached, status=status.HTTP_200_OK)

        try:
            entries = directory_service.featured_entries()
        except (StoreError, BotoCoreError):
            logger.exception("Error listing featured entries")
            return Response(STORE_FAILURE, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        data = {
            'display': config.featured_groups_display,
            'results': _serialize(entries, config),
        }
        cache_service.set_cached(key, data)
        return Response(data, status=status.HTTP_200_OK)


class EntryDetailView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, group_id, *args, **kwargs):
        config = get_moderation_settings()
        key = cache_service.detail_key(group_id)
        cached = cache_service.get_cached(key)
        if cached is not None:
            return Response(cached, status=status.HTTP_200_OK)

        try:
            entry = dynamodb_handler.get_entry_store().get_entry(group_id)
        except (StoreError, BotoCoreError):
            logger.exception("Error loading entry %s", group_id)
            return Response(STORE_FAILURE, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if entry is None:
            return Response({"error": "Group not found."}, status=status.HTTP_404_NOT_FOUND)

        data = _serialize(entry, config, many=False)
        cache_service.set_cached(key, data)
        return Response(data, status=status.HTTP_200_OK)


class RelatedEntriesView(APIView):
    permission_classes = [AllowAny]

    def get(self, request, group_id, *args, **kwargs):
        config = get_moderation_settings()
        store = dynamodb_handler.get_entry_store()
        try:
            entry = store.get_entry(group_id)
            if entry is None:
                return Response({"error": "Group not found."}, status=status.HTTP_404_NOT_FOUND)
            related = directory_service.related_entries(entry, store=store)
        except (StoreError, BotoCoreError):
            logger.exception("Error loading related entries for %s", group_id)
            return Response(STORE_FAILURE, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({'results': _serialize(related, config)}, status=status.HTTP_200_OK)


class RateEntryView(APIView):
    """
    Adds a 1-5 star rating. Each browser may rate an entry once; the rated
    ids are kept in a signed cookie that only this view writes.
    """
    permission_classes = [AllowAny]

    def post(self, request, group_id, *args, **kwargs):
        serializer = RatingSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        rated_ids = rating_service.get_rated_ids(request)
        result = rating_service.submit_rating(group_id, serializer.validated_data['rating'], rated_ids)

        payload = result.to_dict()
        new_rated_ids = payload.pop('rated_ids', None)
        response = Response(payload, status=result.http_status)
        if result.success:
            rating_service.set_rated_cookie(response, new_rated_ids)
        return response


class ClickEntryView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, group_id, *args, **kwargs):
        result = rating_service.record_click(group_id)
        return Response(result.to_dict(), status=result.http_status)


class LinkPreviewView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LinkPreviewRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        preview = link_preview.fetch_link_preview(serializer.validated_data['link'])
        if preview.error:
            return Response({"error": preview.error}, status=status.HTTP_400_BAD_REQUEST)
        return Response(preview.to_dict(), status=status.HTTP_200_OK)


# ==============================================================================
# Admin back-office
# ==============================================================================
class AdminEntryListView(APIView):
    """
    Cursor-paginated listing of every entry. Pass the next_cursor of one
    page as ?cursor= to get the next.
    """
    permission_classes = [HasAdminAPIKey]

    def get(self, request, *args, **kwargs):
        cursor = request.query_params.get('cursor')
        try:
            limit = int(request.query_params.get('limit', directory_service.ADMIN_PAGE_SIZE))
        except ValueError:
            return Response({"error": "limit must be an integer."}, status=status.HTTP_400_BAD_REQUEST)

        key = cache_service.listing_key({'cursor': cursor, 'limit': limit}, admin=True)
        cached = cache_service.get_cached(key)
        if cached is not None:
            return Response(cached, status=status.HTTP_200_OK)

        try:
            page = directory_service.admin_page(cursor=cursor, limit=limit)
        except ValueError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except (StoreError, BotoCoreError):
            logger.exception("Error loading admin listing")
            return Response(STORE_FAILURE, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        # Admins always see every counter.
        page['results'] = EntrySerializer(page['results'], many=True).data
        cache_service.set_cached(key, page)
        return Response(page, status=status.HTTP_200_OK)


class AdminEntryView(APIView):
    permission_classes = [HasAdminAPIKey]

    def delete(self, request, group_id, *args, **kwargs):
        result = directory_service.delete_entry(group_id)
        return Response(result.to_dict(), status=result.http_status)


class AdminFeaturedView(APIView):
    permission_classes = [HasAdminAPIKey]

    def post(self, request, group_id, *args, **kwargs):
        serializer = FeaturedSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = directory_service.set_featured(group_id, serializer.validated_data['featured'])
        payload = result.to_dict()
        if payload.get('entry') is not None:
            payload['entry'] = EntrySerializer(payload['entry']).data
        return Response(payload, status=result.http_status)


class AdminImageUploadView(APIView):
    """Uploads an entry image to S3 and returns its public URL."""
    permission_classes = [HasAdminAPIKey]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, *args, **kwargs):
        serializer = ImageUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        image = serializer.validated_data['image']
        file_type = image.name.rsplit('.', 1)[-1].lower() if '.' in image.name else 'jpeg'
        if file_type not in s3_uploader.CONTENT_TYPES:
            return Response({"error": "Unsupported image type."}, status=status.HTTP_400_BAD_REQUEST)

        image_url = s3_uploader.upload_image(image, file_type=file_type)
        if not image_url:
            return Response(
                {"error": "Failed to upload image. Please try again."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return Response({"imageUrl": image_url}, status=status.HTTP_201_CREATED)
