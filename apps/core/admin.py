# apps/core/admin.py

from django.contrib import admin
from solo.admin import SingletonModelAdmin
from .models import ModerationSettings, LayoutSettings, Category, Country


@admin.register(ModerationSettings)
class ModerationSettingsAdmin(SingletonModelAdmin):
    fieldsets = (
        ('Resubmission Cooldown', {
            'fields': ('cooldown_enabled', ('cooldown_value', 'cooldown_unit')),
        }),
        ('Listing Display', {
            'fields': (
                'groups_per_page',
                'featured_groups_display',
                'show_ratings',
                'show_clicks',
                'show_newsletter',
                'show_dynamic_seo_content',
            ),
        }),
    )


admin.site.register(LayoutSettings, SingletonModelAdmin)


class TaxonomyItemAdmin(admin.ModelAdmin):
    """
    Admin configuration shared by the taxonomy lists.
    """
    list_display = ('label', 'value')
    search_fields = ('label', 'value')
    list_per_page = 50

    def get_readonly_fields(self, request, obj=None):
        # The value is the primary key; changing it would create a new row.
        if obj is not None:
            return ('value',)
        return ()


admin.site.register(Category, TaxonomyItemAdmin)
admin.site.register(Country, TaxonomyItemAdmin)
