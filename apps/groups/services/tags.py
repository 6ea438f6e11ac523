# apps/groups/services/tags.py

import re

MAX_TAGS = 10
MAX_TAG_LENGTH = 30

_DISALLOWED_TAG_CHARS = re.compile(r'[^A-Za-z0-9 ]')


def sanitize_tags(raw: str | None) -> list[str]:
    """
    Turns a comma-separated tag string into at most 10 clean tags.

    Each candidate is trimmed, stripped of everything but ASCII letters,
    digits and spaces, cut to 30 characters and trimmed again. Candidates
    of one character or less are dropped, duplicates keep their first
    occurrence (case-sensitive) and order is preserved.

    Idempotent: sanitize_tags(','.join(sanitize_tags(x))) == sanitize_tags(x).
    """
    if not raw:
        return []

    tags = []
    seen = set()
    for candidate in raw.split(','):
        tag = _DISALLOWED_TAG_CHARS.sub('', candidate.strip())
        tag = tag[:MAX_TAG_LENGTH].strip()
        if len(tag) <= 1 or tag in seen:
            continue
        seen.add(tag)
        tags.append(tag)
        if len(tags) == MAX_TAGS:
            break
    return tags
