# apps/core/api/permissions.py

import hmac
import logging

from django.conf import settings
from rest_framework.permissions import BasePermission

logger = logging.getLogger(__name__)

ADMIN_API_KEY_HEADER = 'X-Admin-API-Key'


def has_admin_api_key(request) -> bool:
    """
    True when the request carries the configured admin key in the
    X-Admin-API-Key header. Always False when no key is configured.
    """
    expected = settings.ADMIN_API_KEY
    if not expected:
        logger.critical("ADMIN_API_KEY is not set. Admin endpoints are disabled.")
        return False

    provided = request.headers.get(ADMIN_API_KEY_HEADER) or ''
    return hmac.compare_digest(provided.encode(), expected.encode())


class HasAdminAPIKey(BasePermission):
    message = 'Forbidden'

    def has_permission(self, request, view):
        return has_admin_api_key(request)


class ReadOnlyOrAdminAPIKey(BasePermission):
    """Anyone may read; writes need the admin key."""
    message = 'Forbidden'

    def has_permission(self, request, view):
        if request.method in ('GET', 'HEAD', 'OPTIONS'):
            return True
        return has_admin_api_key(request)
