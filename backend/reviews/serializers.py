from rest_framework import serializers

from reviews.models import ExtensionRequest


class ReviewTargetSerializer(serializers.Serializer):
    reg_no = serializers.CharField()
    review_name = serializers.CharField()
    faculty_type = serializers.CharField()


class ExtensionCreateSerializer(ReviewTargetSerializer):
    reason = serializers.CharField(allow_blank=True, trim_whitespace=False)


class ResolveRequestSerializer(serializers.Serializer):
    request_id = serializers.IntegerField()
    status = serializers.CharField()
    new_deadline = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class BatchStatusSerializer(serializers.Serializer):
    requests = serializers.ListField(child=serializers.DictField(), allow_empty=True)


class StudentReviewSerializer(ReviewTargetSerializer):
    # raw values; type checks happen in the submission service
    marks = serializers.JSONField(required=False)
    comments = serializers.JSONField(required=False)
    attendance = serializers.JSONField(required=False)


class TeamReviewSerializer(serializers.Serializer):
    review_name = serializers.CharField()
    faculty_type = serializers.CharField()
    students = serializers.DictField(child=serializers.JSONField())


class PptApprovalSerializer(serializers.Serializer):
    approvals = serializers.JSONField()


class BestProjectSerializer(serializers.Serializer):
    best_project = serializers.BooleanField()


class HardLockSerializer(serializers.Serializer):
    reg_no = serializers.CharField()
    review_name = serializers.CharField()
    locked = serializers.BooleanField()


class ExtensionRequestSerializer(serializers.ModelSerializer):
    reg_no = serializers.CharField(source='student.reg_no', read_only=True)
    review_name = serializers.CharField(source='review_spec.review_name', read_only=True)

    class Meta:
        model = ExtensionRequest
        fields = (
            'id', 'reg_no', 'review_name', 'faculty_type', 'faculty', 'reason', 'status',
            'new_deadline', 'resolved_by', 'created_at', 'resolved_at',
        )
        read_only_fields = fields


def record_payload(record, reset_components=None) -> dict:
    data = {
        'reg_no': record.student.reg_no,
        'review_name': record.review_spec.review_name,
        'marks': record.marks,
        'comments': record.comments,
        'attendance': {'value': record.attendance_value, 'locked': record.attendance_locked},
        'locked': record.locked,
    }
    if reset_components is not None:
        data['reset_components'] = list(reset_components)
    return data
