# apps/groups/services/link_preview.py

import html
import logging
import re
from dataclasses import dataclass, field, asdict

import requests
from django.conf import settings

from .links import is_invite_link

logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (compatible; LinkHubPreview/1.0)'

_META_TAG = re.compile(r'<meta\s+[^>]*>', re.IGNORECASE)
_META_ATTR = re.compile(r'([a-zA-Z:_-]+)\s*=\s*("([^"]*)"|\'([^\']*)\')')
_TITLE_TAG = re.compile(r'<title[^>]*>(.*?)</title>', re.IGNORECASE | re.DOTALL)


@dataclass
class LinkPreview:
    """A structured class to hold what a link preview fetch found."""
    title: str = ""
    description: str = ""
    images: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def image(self):
        return self.images[0] if self.images else None

    def to_dict(self):
        data = asdict(self)
        data['image'] = self.image
        if data['error'] is None:
            data.pop('error')
        return data


def parse_open_graph(page: str) -> LinkPreview:
    """
    Extracts og:title, og:description and og:image from an HTML page,
    falling back to <title> and the description meta tag.
    """
    properties = {}
    images = []
    for tag in _META_TAG.findall(page):
        attrs = {}
        for name, _, double_quoted, single_quoted in _META_ATTR.findall(tag):
            attrs[name.lower()] = html.unescape(double_quoted or single_quoted)
        key = attrs.get('property') or attrs.get('name')
        content = attrs.get('content')
        if not key or content is None:
            continue
        key = key.lower()
        if key == 'og:image':
            images.append(content)
        else:
            properties.setdefault(key, content)

    title = properties.get('og:title')
    if not title:
        match = _TITLE_TAG.search(page)
        title = html.unescape(match.group(1).strip()) if match else ""

    description = properties.get('og:description') or properties.get('description', "")
    return LinkPreview(title=title.strip(), description=description.strip(), images=images)


def fetch_link_preview(link: str) -> LinkPreview:
    """
    Fetches title, description and images for an invite link. Failures
    (bad link, unreachable or private page, nothing to show) come back as
    a LinkPreview with error set; this never raises.
    """
    if not link or not is_invite_link(link):
        return LinkPreview(error="Invalid WhatsApp group link.")

    try:
        response = requests.get(
            link,
            headers={'User-Agent': USER_AGENT},
            timeout=settings.LINK_PREVIEW_TIMEOUT,
        )
        response.raise_for_status()
    except requests.exceptions.Timeout:
        logger.warning("Link preview timed out for %s", link)
        return LinkPreview(error="Link preview timed out.")
    except requests.exceptions.RequestException as e:
        logger.warning("Link preview failed for %s: %s", link, e)
        return LinkPreview(error="Failed to fetch link preview.")

    preview = parse_open_graph(response.text)
    if not preview.title and not preview.description:
        return LinkPreview(error="Could not fetch group preview.")
    return preview
