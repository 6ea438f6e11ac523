# apps/reports/api/urls.py

from django.urls import path
from .views import SubmitReportView, AdminReportListView, AdminReportView

app_name = 'reports-api'

urlpatterns = [
    path('', SubmitReportView.as_view(), name='submit-report'),
    path('admin/', AdminReportListView.as_view(), name='admin-list-reports'),
    path('admin/<int:report_id>/', AdminReportView.as_view(), name='admin-resolve-report'),
]
