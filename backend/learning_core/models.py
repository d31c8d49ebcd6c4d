from django.db import models
from django.db.models import Exists, OuterRef
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.utils import timezone
import uuid

VARIANT_SETS = ('variant1', 'variant2', 'variant3')


class User(AbstractUser):
    SYSTEM_CHOICES = [
        ('center', 'Center'),
        ('online', 'Online'),
        ('school', 'School'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    second_name = models.CharField(max_length=50, blank=True)
    third_name = models.CharField(max_length=50, blank=True)
    fourth_name = models.CharField(max_length=50, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    parent_phone = models.CharField(max_length=20, blank=True)
    student_code = models.CharField(
        max_length=50, unique=True, null=True, blank=True)
    system = models.CharField(
        max_length=10, choices=SYSTEM_CHOICES, default='online')
    year = models.CharField(max_length=20, blank=True)
    devices = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = 'users'

    @property
    def full_name(self):
        parts = [self.first_name, self.second_name, self.third_name, self.fourth_name]
        return ' '.join(p for p in parts if p)


class Course(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    year = models.CharField(max_length=20)
    title = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['year', 'title']

    def __str__(self):
        return f"{self.year} - {self.title}"


class LectureQuerySet(models.QuerySet):
    def with_availability(self):
        """Annotate whether each lecture has quiz MCQs and homework items."""
        quiz = Question.objects.filter(
            lecture=OuterRef('pk'), question_set__in=VARIANT_SETS, question_type='mcq')
        homework = Question.objects.filter(lecture=OuterRef('pk'), question_set='homework')
        return self.annotate(quiz_available=Exists(quiz), homework_available=Exists(homework))

    def visible(self):
        return self.filter(is_hidden=False)


class Lecture(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    course = models.ForeignKey(
        Course,
        on_delete=models.CASCADE,
        related_name='lectures')
    order = models.IntegerField()
    title = models.CharField(max_length=200)
    is_hidden = models.BooleanField(default=False)
    video_name = models.CharField(max_length=200, blank=True)
    video_id = models.CharField(max_length=100, blank=True)
    homework_link = models.URLField(blank=True)

    # Per-cohort availability; school is always enabled
    is_enabled_center = models.BooleanField(default=True)
    is_enabled_online = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = LectureQuerySet.as_manager()

    class Meta:
        ordering = ['order']
        unique_together = ['course', 'order']

    def __str__(self):
        return self.title

    @property
    def year(self):
        return self.course.year

    @property
    def has_quiz(self):
        if hasattr(self, 'quiz_available'):
            return self.quiz_available
        return self.questions.filter(
            question_set__in=VARIANT_SETS, question_type='mcq').exists()

    @property
    def has_homework(self):
        if hasattr(self, 'homework_available'):
            return self.homework_available
        return self.questions.filter(question_set='homework').exists()

    def available_variants(self):
        """Variant sets that hold at least one MCQ, in variant order."""
        present = set(
            self.questions.filter(question_set__in=VARIANT_SETS, question_type='mcq')
            .values_list('question_set', flat=True))
        return [v for v in VARIANT_SETS if v in present]

    def is_enabled_for(self, system):
        if system == 'center':
            return self.is_enabled_center
        if system == 'online':
            return self.is_enabled_online
        return True


def validate_question(question_set, question_type, text, options=None, correct_answer_index=None):
    """Raise ValidationError when a question violates its type's invariants."""
    if question_type == 'mcq':
        options = options or []
        if not (text or '').strip():
            raise ValidationError("Please complete all MCQ fields and select a correct answer.")
        if len(options) < 2 or len(options) > 4 or any(not str(o).strip() for o in options):
            raise ValidationError("Please complete all MCQ fields and select a correct answer.")
        if correct_answer_index is None or not 0 <= correct_answer_index < len(options):
            raise ValidationError("Please complete all MCQ fields and select a correct answer.")
        if question_set == 'essay':
            raise ValidationError("Multiple choice questions belong to a quiz variant or homework.")
    elif question_type == 'essay':
        if not (text or '').strip():
            raise ValidationError("Please enter an essay question.")
        if question_set in VARIANT_SETS:
            raise ValidationError("Essay questions belong to the essay set or homework.")
    else:
        raise ValidationError(f"Unknown question type: {question_type}")


class Question(models.Model):
    SET_CHOICES = [
        ('variant1', 'Quiz variant 1'),
        ('variant2', 'Quiz variant 2'),
        ('variant3', 'Quiz variant 3'),
        ('essay', 'Quiz essay'),
        ('homework', 'Homework'),
    ]
    TYPE_CHOICES = [
        ('mcq', 'Multiple Choice'),
        ('essay', 'Essay'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lecture = models.ForeignKey(
        Lecture,
        on_delete=models.CASCADE,
        related_name='questions')
    question_set = models.CharField(max_length=10, choices=SET_CHOICES)
    question_type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    text = models.TextField()
    image_url = models.URLField(null=True, blank=True)
    options = models.JSONField(default=list, blank=True)
    correct_answer_index = models.IntegerField(null=True, blank=True)
    marks = models.IntegerField(default=1)
    order_index = models.IntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['order_index', 'created_at']
        indexes = [models.Index(fields=['lecture', 'question_set'], name='question_lecture_set_idx')]

    def __str__(self):
        return f"{self.question_set} Q{self.order_index}"

    def clean(self):
        validate_question(
            self.question_set, self.question_type, self.text,
            self.options, self.correct_answer_index)

    @property
    def is_mcq(self):
        return self.question_type == 'mcq'


class QuizSetting(models.Model):
    lecture = models.OneToOneField(
        Lecture,
        on_delete=models.CASCADE,
        related_name='quiz_setting')
    duration_minutes = models.PositiveIntegerField()
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.lecture} ({self.duration_minutes} min)"


class Attendance(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lecture = models.ForeignKey(
        Lecture,
        on_delete=models.CASCADE,
        related_name='attendance')
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name='attendance')
    marked_at = models.DateTimeField(default=timezone.now)
    marked_by = models.CharField(max_length=150, blank=True)

    class Meta:
        unique_together = ['lecture', 'student']
        ordering = ['-marked_at']
