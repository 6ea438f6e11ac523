# apps/groups/api/urls.py

from django.urls import path
from .views import (
    AdminEntryListView,
    AdminEntryView,
    AdminFeaturedView,
    AdminImageUploadView,
    ClickEntryView,
    EntryDetailView,
    EntryListView,
    FeaturedEntriesView,
    LinkPreviewView,
    RateEntryView,
    RelatedEntriesView,
    SubmitEntryView,
)

app_name = 'groups-api'

urlpatterns = [
    path('', EntryListView.as_view(), name='list-groups'),
    path('submit/', SubmitEntryView.as_view(), name='submit-group'),
    path('featured/', FeaturedEntriesView.as_view(), name='featured-groups'),
    path('preview/', LinkPreviewView.as_view(), name='link-preview'),

    path('admin/', AdminEntryListView.as_view(), name='admin-list-groups'),
    path('admin/upload-image/', AdminImageUploadView.as_view(), name='admin-upload-image'),
    path('admin/<str:group_id>/', AdminEntryView.as_view(), name='admin-group'),
    path('admin/<str:group_id>/featured/', AdminFeaturedView.as_view(), name='admin-featured'),

    path('<str:group_id>/', EntryDetailView.as_view(), name='group-detail'),
    path('<str:group_id>/related/', RelatedEntriesView.as_view(), name='related-groups'),
    path('<str:group_id>/rate/', RateEntryView.as_view(), name='rate-group'),
    path('<str:group_id>/click/', ClickEntryView.as_view(), name='click-group'),
]
