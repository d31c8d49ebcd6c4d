from rest_framework import serializers
from .models import HomeworkSubmission


class HomeworkAnswersSerializer(serializers.Serializer):
    mcq_answers = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    essay_answers = serializers.DictField(
        child=serializers.CharField(allow_blank=True), required=False, default=dict)


class HomeworkSubmissionSerializer(serializers.ModelSerializer):
    class Meta:
        model = HomeworkSubmission
        fields = ['lecture', 'score', 'total', 'answers', 'homework_completed', 'submitted_at']
