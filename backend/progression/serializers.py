from rest_framework import serializers
from learning_core.serializers import LectureSerializer
from .models import AccessCode, ProgressRecord


class ProgressRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProgressRecord
        fields = [
            'lecture', 'unlocked', 'quiz_completed', 'earned_marks', 'total_possible_marks',
            'score', 'total', 'answers', 'completed_at', 'attempts', 'used_variants',
            'last_variant_used', 'is_enabled',
        ]


class LectureEntrySerializer(serializers.Serializer):
    """One row of a student's lecture list: the lecture and whether it is open."""
    lecture = LectureSerializer()
    locked = serializers.BooleanField(source='access.locked')
    lock_reason = serializers.CharField(source='access.lock_reason', allow_null=True)
    can_unlock_with_code = serializers.BooleanField(source='access.can_unlock_with_code')
    quiz_completed = serializers.SerializerMethodField()
    earned_marks = serializers.SerializerMethodField()
    total_possible_marks = serializers.SerializerMethodField()
    homework_completed = serializers.SerializerMethodField()

    def get_quiz_completed(self, entry):
        return bool(entry['progress'] and entry['progress'].quiz_completed)

    def get_earned_marks(self, entry):
        return entry['progress'].earned_marks if entry['progress'] else 0

    def get_total_possible_marks(self, entry):
        return entry['progress'].total_possible_marks if entry['progress'] else 0

    def get_homework_completed(self, entry):
        return bool(entry['homework'] and entry['homework'].homework_completed)


class QuizSubmitSerializer(serializers.Serializer):
    mcq_answers = serializers.DictField(child=serializers.IntegerField(), required=False, default=dict)
    essay_answers = serializers.DictField(
        child=serializers.CharField(allow_blank=True), required=False, default=dict)
    timed_out = serializers.BooleanField(required=False, default=False)


class RedeemCodeSerializer(serializers.Serializer):
    code = serializers.CharField(allow_blank=True, trim_whitespace=True)
    lecture_id = serializers.UUIDField()


class ToggleSerializer(serializers.Serializer):
    is_enabled = serializers.BooleanField()


class AccessCodeSerializer(serializers.ModelSerializer):
    class Meta:
        model = AccessCode
        fields = ['id', 'code', 'is_used', 'used_by', 'used_at', 'lecture', 'created_at']


class StudentProgressRowSerializer(serializers.ModelSerializer):
    """Admin review of one student's record on a lecture."""
    student_name = serializers.CharField(source='student.full_name')
    student_code = serializers.CharField(source='student.student_code', allow_null=True)
    system = serializers.CharField(source='student.system')
    homework_completed = serializers.SerializerMethodField()
    homework_score = serializers.SerializerMethodField()

    class Meta:
        model = ProgressRecord
        fields = [
            'student', 'student_name', 'student_code', 'system', 'unlocked', 'quiz_completed',
            'score', 'total', 'attempts', 'used_variants', 'last_variant_used', 'is_enabled',
            'answers', 'completed_at', 'homework_completed', 'homework_score',
        ]

    def _homework(self, record):
        return self.context.get('homework', {}).get(record.student_id)

    def get_homework_completed(self, record):
        submission = self._homework(record)
        return bool(submission and submission.homework_completed)

    def get_homework_score(self, record):
        submission = self._homework(record)
        if submission is None:
            return None
        return {'score': submission.score, 'total': submission.total}
