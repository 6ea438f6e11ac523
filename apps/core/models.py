# apps/core/models.py

from django.db import models
from django.core.cache import cache
from django.core.validators import MinValueValidator, MaxValueValidator
from solo.models import SingletonModel

MODERATION_SETTINGS_CACHE_KEY = 'moderation_settings'
LAYOUT_SETTINGS_CACHE_KEY = 'layout_settings'


# ==============================================================================
# 1. Moderation Settings
# ==============================================================================
class ModerationSettings(SingletonModel):
    """
    Process-wide moderation and display configuration, edited by an admin.
    Created with the defaults below on first read (django-solo get_solo()).
    """
    class CooldownUnit(models.TextChoices):
        HOURS = 'hours', 'Hours'
        DAYS = 'days', 'Days'
        MONTHS = 'months', 'Months'

    class FeaturedDisplay(models.TextChoices):
        SLIDER = 'slider', 'Slider'
        GRID = 'grid', 'Grid'
        LIST = 'list', 'List'

    # Resubmission cooldown
    cooldown_enabled = models.BooleanField(
        default=True,
        help_text="Require a waiting period before the same link can be resubmitted."
    )
    cooldown_value = models.PositiveIntegerField(
        default=6,
        validators=[MinValueValidator(1)],
        help_text="Length of the cooldown, in the unit below."
    )
    cooldown_unit = models.CharField(
        max_length=10,
        choices=CooldownUnit.choices,
        default=CooldownUnit.HOURS,
        help_text="Months are counted as 30 days."
    )

    # Listing display
    groups_per_page = models.PositiveIntegerField(
        default=20,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
        help_text="Number of groups shown per listing page."
    )
    featured_groups_display = models.CharField(
        max_length=10,
        choices=FeaturedDisplay.choices,
        default=FeaturedDisplay.SLIDER,
    )
    show_newsletter = models.BooleanField(default=False)
    show_dynamic_seo_content = models.BooleanField(default=False)
    show_ratings = models.BooleanField(
        default=True,
        help_text="Expose rating totals and averages in public listings."
    )
    show_clicks = models.BooleanField(
        default=True,
        help_text="Expose click counters in public listings."
    )

    class Meta:
        verbose_name = "Moderation Settings"
        verbose_name_plural = "Moderation Settings"

    def __str__(self):
        return "Moderation Settings"

    def save(self, *args, **kwargs):
        # Drop the cached snapshot so the next request reads the new values.
        cache.delete(MODERATION_SETTINGS_CACHE_KEY)
        super().save(*args, **kwargs)


# ==============================================================================
# 2. Layout Settings
# ==============================================================================
class LayoutSettings(SingletonModel):
    """Site chrome configured from the back-office: logo, navigation, footer and SEO blocks."""
    logo_url = models.URLField(max_length=1024, blank=True)
    nav_links = models.JSONField(
        default=list,
        blank=True,
        help_text='List of {"label": ..., "href": ...} objects.'
    )
    footer_content = models.TextField(blank=True)
    background_settings = models.JSONField(default=dict, blank=True)
    homepage_seo_content = models.TextField(blank=True)
    seo_settings = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name = "Layout Settings"
        verbose_name_plural = "Layout Settings"

    def __str__(self):
        return "Layout Settings"

    def save(self, *args, **kwargs):
        cache.delete(LAYOUT_SETTINGS_CACHE_KEY)
        super().save(*args, **kwargs)


# ==============================================================================
# 3. Taxonomy
# ==============================================================================
class TaxonomyItem(models.Model):
    """
    A value/label pair used to classify entries. The value doubles as the
    primary key. Entries keep their stored value when an item is deleted.
    """
    value = models.CharField(max_length=50, primary_key=True)
    label = models.CharField(max_length=100)

    class Meta:
        abstract = True
        ordering = ['label']

    def __str__(self):
        return self.label

    def save(self, *args, **kwargs):
        self.value = self.value.strip().lower()
        super().save(*args, **kwargs)


class Category(TaxonomyItem):
    class Meta(TaxonomyItem.Meta):
        verbose_name_plural = "Categories"


class Country(TaxonomyItem):
    class Meta(TaxonomyItem.Meta):
        verbose_name_plural = "Countries"
