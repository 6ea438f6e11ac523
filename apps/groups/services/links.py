# apps/groups/services/links.py

import uuid

from django.conf import settings

ENTRY_TYPE_GROUP = 'group'
ENTRY_TYPE_CHANNEL = 'channel'
ENTRY_TYPES = (ENTRY_TYPE_GROUP, ENTRY_TYPE_CHANNEL)


def normalize_link(link: str) -> str:
    """Canonical form of an invite link, used as the dedup key."""
    return link.strip().rstrip('/')


def entry_id_for_link(link: str) -> str:
    """
    Entries are keyed by a UUID derived from the normalized link, so a
    conditional put on the id is enough to keep one entry per link.
    """
    return str(uuid.uuid5(uuid.NAMESPACE_URL, normalize_link(link)))


def invite_prefixes(entry_type: str) -> list[str]:
    if entry_type == ENTRY_TYPE_CHANNEL:
        return list(settings.CHANNEL_INVITE_PREFIXES)
    return list(settings.GROUP_INVITE_PREFIXES)


def is_invite_link(link: str, entry_type: str | None = None) -> bool:
    """
    Checks the link against the invite prefixes for entry_type, or against
    both group and channel prefixes when no type is given.
    """
    if entry_type is None:
        prefixes = invite_prefixes(ENTRY_TYPE_GROUP) + invite_prefixes(ENTRY_TYPE_CHANNEL)
    else:
        prefixes = invite_prefixes(entry_type)
    return any(link.startswith(prefix) for prefix in prefixes)
