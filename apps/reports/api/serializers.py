# apps/reports/api/serializers.py

from rest_framework import serializers

from ..models import Report

OTHER_REASON = 'Other'
REPORT_REASONS = [
    'Broken Link',
    'Spam or Advertisement',
    'Inappropriate Content',
    'Different from Description',
    OTHER_REASON,
]
MIN_OTHER_REASON_LENGTH = 10


class ReportSubmissionSerializer(serializers.Serializer):
    groupId = serializers.CharField(max_length=64)
    groupTitle = serializers.CharField(max_length=255)
    reason = serializers.ChoiceField(
        choices=REPORT_REASONS,
        error_messages={'required': 'Please select a reason.', 'invalid_choice': 'Please select a reason.'}
    )
    otherReason = serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=False, max_length=500
    )

    def validate(self, data):
        if data['reason'] == OTHER_REASON:
            detail = (data.get('otherReason') or '').strip()
            if len(detail) < MIN_OTHER_REASON_LENGTH:
                raise serializers.ValidationError({
                    'otherReason': ['Please provide a detailed reason (at least 10 characters).']
                })
        return data


class ReportSerializer(serializers.ModelSerializer):
    groupId = serializers.CharField(source='group_id')
    groupTitle = serializers.CharField(source='group_title')
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Report
        fields = ['id', 'groupId', 'groupTitle', 'reason', 'status', 'createdAt']
