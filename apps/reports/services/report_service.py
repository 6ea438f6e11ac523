# apps/reports/services/report_service.py

import logging

from django.db import DatabaseError

from apps.core.services.results import OperationResult
from ..api.serializers import ReportSubmissionSerializer, OTHER_REASON
from ..models import Report

logger = logging.getLogger(__name__)


def submit_report(payload) -> OperationResult:
    """
    Records a visitor's report against a group. Reports are not
    deduplicated and carry no reporter identity.
    """
    serializer = ReportSubmissionSerializer(data=payload)
    if not serializer.is_valid():
        return OperationResult.fail(
            'validation',
            'Validation failed. Please check your input.',
            errors=serializer.errors
        )

    data = serializer.validated_data
    reason = data['reason']
    if reason == OTHER_REASON:
        reason = f"{OTHER_REASON}: {data['otherReason'].strip()}"

    try:
        report = Report.objects.create(
            group_id=data['groupId'],
            group_title=data['groupTitle'],
            reason=reason,
        )
    except DatabaseError:
        logger.exception("Could not save report for entry %s", data['groupId'])
        return OperationResult.fail('store_error', 'Failed to submit report. Please try again.')

    logger.info("Report %s filed against entry %s", report.pk, report.group_id)
    return OperationResult.ok('Thank you for your report. We will review it shortly.', report_id=report.pk)


def resolve_report(report_id) -> OperationResult:
    deleted, _ = Report.objects.filter(pk=report_id).delete()
    if not deleted:
        return OperationResult.fail('not_found', 'Report not found.')
    return OperationResult.ok('Report resolved.')
