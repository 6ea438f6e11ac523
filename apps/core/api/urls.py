# apps/core/api/urls.py

from django.urls import path
from .views import (
    ModerationSettingsView,
    LayoutSettingsView,
    TaxonomyListView,
    TaxonomyItemView,
)

app_name = 'core-api'

urlpatterns = [
    path('settings/moderation/', ModerationSettingsView.as_view(), name='moderation-settings'),
    path('settings/layout/', LayoutSettingsView.as_view(), name='layout-settings'),
    path('taxonomy/<str:kind>/', TaxonomyListView.as_view(), name='taxonomy-list'),
    path('taxonomy/<str:kind>/<str:value>/', TaxonomyItemView.as_view(), name='taxonomy-item'),
]
