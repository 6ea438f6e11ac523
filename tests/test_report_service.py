import pytest

from apps.reports.models import Report
from apps.reports.services.report_service import resolve_report, submit_report

pytestmark = pytest.mark.django_db


def _payload(**overrides):
    payload = {'groupId': 'entry-1', 'groupTitle': 'Python Learners', 'reason': 'Broken Link'}
    payload.update(overrides)
    return payload


def test_report_is_stored_as_pending():
    result = submit_report(_payload())

    assert result.success
    report = Report.objects.get(pk=result.data['report_id'])
    assert report.group_id == 'entry-1'
    assert report.group_title == 'Python Learners'
    assert report.reason == 'Broken Link'
    assert report.status == Report.ReportStatus.PENDING
    assert report.created_at is not None


def test_repeated_reports_are_not_deduplicated():
    submit_report(_payload())
    submit_report(_payload())
    assert Report.objects.filter(group_id='entry-1').count() == 2


def test_other_reason_needs_ten_characters():
    result = submit_report(_payload(reason='Other', otherReason='123456789'))

    assert not result.success
    assert result.error_code == 'validation'
    assert 'otherReason' in result.errors
    assert not Report.objects.exists()


def test_other_reason_is_trimmed_before_counting():
    result = submit_report(_payload(reason='Other', otherReason='   short    '))
    assert result.error_code == 'validation'


def test_other_reason_with_ten_characters_is_accepted():
    result = submit_report(_payload(reason='Other', otherReason='  1234567890 '))

    assert result.success
    assert Report.objects.get().reason == 'Other: 1234567890'


def test_unknown_reason_is_rejected():
    result = submit_report(_payload(reason='I just do not like it'))
    assert result.error_code == 'validation'
    assert 'reason' in result.errors


def test_resolve_deletes_report():
    report_id = submit_report(_payload()).data['report_id']

    assert resolve_report(report_id).success
    assert not Report.objects.exists()
    assert resolve_report(report_id).error_code == 'not_found'
