from rest_framework import serializers
from django.core.exceptions import ValidationError
from .models import Attendance, Course, Lecture, Question, QuizSetting, validate_question


class CourseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Course
        fields = ['id', 'year', 'title', 'created_at']


class LectureSerializer(serializers.ModelSerializer):
    has_quiz = serializers.BooleanField(read_only=True)
    has_homework = serializers.BooleanField(read_only=True)

    class Meta:
        model = Lecture
        fields = [
            'id', 'course', 'order', 'title', 'is_hidden', 'video_name', 'video_id',
            'homework_link', 'is_enabled_center', 'is_enabled_online',
            'has_quiz', 'has_homework',
        ]


class QuestionSerializer(serializers.ModelSerializer):
    """Full question, including the correct answer. Admin use only."""

    class Meta:
        model = Question
        fields = [
            'id', 'lecture', 'question_set', 'question_type', 'text', 'image_url',
            'options', 'correct_answer_index', 'marks', 'order_index',
        ]
        read_only_fields = ['lecture']

    def validate(self, attrs):
        instance = self.instance
        merged = {
            field: attrs.get(field, getattr(instance, field, None))
            for field in ('question_set', 'question_type', 'text', 'options', 'correct_answer_index')
        }
        try:
            validate_question(**merged)
        except ValidationError as e:
            raise serializers.ValidationError({'error': e.messages[0]})
        return attrs


class StudentQuestionSerializer(serializers.ModelSerializer):
    """Question as served to a student: no correct answer."""

    class Meta:
        model = Question
        fields = ['id', 'question_type', 'text', 'image_url', 'options', 'marks']


class QuestionCreateSerializer(serializers.Serializer):
    question_set = serializers.ChoiceField(choices=Question.SET_CHOICES)
    question_type = serializers.ChoiceField(choices=Question.TYPE_CHOICES)
    text = serializers.CharField(allow_blank=True)
    options = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False)
    correct_answer_index = serializers.IntegerField(required=False, allow_null=True)
    image_url = serializers.URLField(required=False, allow_blank=True, allow_null=True)
    marks = serializers.IntegerField(required=False, default=1, min_value=1)


class QuizSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuizSetting
        fields = ['lecture', 'duration_minutes', 'updated_at']
        read_only_fields = ['lecture', 'updated_at']


class AttendanceSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.full_name', read_only=True)
    student_code = serializers.CharField(source='student.student_code', read_only=True)

    class Meta:
        model = Attendance
        fields = ['id', 'lecture', 'student', 'student_name', 'student_code', 'marked_at', 'marked_by']


class AttendanceMarkSerializer(serializers.Serializer):
    student_code = serializers.CharField()
