from rest_framework import serializers


class ResolvedReviewSerializer(serializers.Serializer):
    review_name = serializers.CharField()
    display_name = serializers.CharField()
    faculty_type = serializers.CharField()
    components = serializers.ListField(child=serializers.DictField())
    deadline = serializers.SerializerMethodField()
    requires_ppt = serializers.BooleanField()
    editable = serializers.BooleanField()

    def get_deadline(self, obj):
        if obj.deadline is None:
            return None
        return {
            'from': serializers.DateTimeField().to_representation(obj.deadline_from) if obj.deadline_from else None,
            'to': serializers.DateTimeField().to_representation(obj.deadline_to) if obj.deadline_to else None,
        }
