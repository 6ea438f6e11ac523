# apps/reports/api/views.py

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework.pagination import PageNumberPagination

from apps.core.api.permissions import HasAdminAPIKey
from ..models import Report
from ..services import report_service
from .serializers import ReportSerializer


class ReportPagination(PageNumberPagination):
    page_size = 50


class SubmitReportView(APIView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        result = report_service.submit_report(request.data)
        return Response(
            result.to_dict(),
            status=status.HTTP_201_CREATED if result.success else result.http_status
        )


class AdminReportListView(APIView):
    """Pending reports, newest first."""
    permission_classes = [HasAdminAPIKey]

    def get(self, request, *args, **kwargs):
        paginator = ReportPagination()
        page = paginator.paginate_queryset(Report.objects.all(), request, view=self)
        return paginator.get_paginated_response(ReportSerializer(page, many=True).data)


class AdminReportView(APIView):
    permission_classes = [HasAdminAPIKey]

    def delete(self, request, report_id, *args, **kwargs):
        result = report_service.resolve_report(report_id)
        return Response(result.to_dict(), status=result.http_status)
