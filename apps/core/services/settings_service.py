# apps/core/services/settings_service.py

from dataclasses import dataclass, asdict

from django.core.cache import cache
from ..models import (
    ModerationSettings,
    LayoutSettings,
    MODERATION_SETTINGS_CACHE_KEY,
    LAYOUT_SETTINGS_CACHE_KEY,
)

CACHE_TIMEOUT_SECONDS = 86400

HOUR_MS = 3_600_000
DAY_MS = 24 * HOUR_MS

# Months are a flat 30 days, not calendar months.
COOLDOWN_UNIT_MS = {
    'hours': HOUR_MS,
    'days': DAY_MS,
    'months': 30 * DAY_MS,
}


@dataclass(frozen=True)
class ModerationConfig:
    """
    Read-only snapshot of ModerationSettings. Services receive one of these
    per operation instead of reading the singleton themselves.
    """
    cooldown_enabled: bool = True
    cooldown_value: int = 6
    cooldown_unit: str = 'hours'
    groups_per_page: int = 20
    featured_groups_display: str = 'slider'
    show_newsletter: bool = False
    show_dynamic_seo_content: bool = False
    show_ratings: bool = True
    show_clicks: bool = True

    @property
    def cooldown_period_ms(self) -> int:
        return self.cooldown_value * COOLDOWN_UNIT_MS[self.cooldown_unit]

    @classmethod
    def from_model(cls, settings: ModerationSettings) -> 'ModerationConfig':
        return cls(
            cooldown_enabled=settings.cooldown_enabled,
            cooldown_value=settings.cooldown_value,
            cooldown_unit=str(settings.cooldown_unit),
            groups_per_page=settings.groups_per_page,
            featured_groups_display=str(settings.featured_groups_display),
            show_newsletter=settings.show_newsletter,
            show_dynamic_seo_content=settings.show_dynamic_seo_content,
            show_ratings=settings.show_ratings,
            show_clicks=settings.show_clicks,
        )

    def to_dict(self):
        return asdict(self)


def get_moderation_settings() -> ModerationConfig:
    """
    Returns the moderation settings snapshot, from the cache when possible.
    The singleton row is created with defaults the first time it is read.
    ModerationSettings.save() clears the cache key.
    """
    snapshot = cache.get(MODERATION_SETTINGS_CACHE_KEY)
    if snapshot is None:
        snapshot = ModerationConfig.from_model(ModerationSettings.get_solo())
        cache.set(MODERATION_SETTINGS_CACHE_KEY, snapshot, timeout=CACHE_TIMEOUT_SECONDS)
    return snapshot


def get_layout_settings() -> LayoutSettings:
    settings = cache.get(LAYOUT_SETTINGS_CACHE_KEY)
    if settings is None:
        settings = LayoutSettings.get_solo()
        cache.set(LAYOUT_SETTINGS_CACHE_KEY, settings, timeout=CACHE_TIMEOUT_SECONDS)
    return settings
