from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('backoffice/', admin.site.urls),
    path('api/groups/', include('apps.groups.api.urls', namespace='groups-api')),
    path('api/reports/', include('apps.reports.api.urls', namespace='reports-api')),
    path('api/', include('apps.core.api.urls', namespace='core-api')),
]
