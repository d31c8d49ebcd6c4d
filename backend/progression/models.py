from django.conf import settings
from django.db import models
from django.utils import timezone
from learning_core.models import Lecture
from .keys import ProgressKey
import math
import uuid


class ProgressRecord(models.Model):
    """Per-student, per-lecture quiz and unlock state."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='progress_records')
    lecture = models.ForeignKey(
        Lecture,
        on_delete=models.CASCADE,
        related_name='progress_records')

    unlocked = models.BooleanField(default=False)
    quiz_completed = models.BooleanField(default=False)
    earned_marks = models.IntegerField(default=0)
    total_possible_marks = models.IntegerField(default=0)

    # Latest submission, written on pass and fail alike
    score = models.IntegerField(null=True, blank=True)
    total = models.IntegerField(null=True, blank=True)
    answers = models.JSONField(default=dict, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    attempts = models.IntegerField(default=0)
    used_variants = models.JSONField(default=list, blank=True)
    last_variant_used = models.CharField(max_length=10, blank=True)

    # Admin override to revoke access after unlock
    is_enabled = models.BooleanField(default=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ['student', 'lecture']
        ordering = ['lecture__course', 'lecture__order']

    def __str__(self):
        return f"{self.student} / {self.lecture}"

    @property
    def key(self):
        return ProgressKey.for_lecture(self.lecture)


class QuizAttemptTimer(models.Model):
    """Exists only while a quiz attempt is in flight."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='quiz_timers')
    lecture = models.ForeignKey(
        Lecture,
        on_delete=models.CASCADE,
        related_name='quiz_timers')
    start_time = models.DateTimeField(default=timezone.now)
    duration_seconds = models.PositiveIntegerField()
    variant = models.CharField(max_length=10)
    question_order = models.JSONField(default=list)

    class Meta:
        unique_together = ['student', 'lecture']

    def remaining_seconds(self, now=None):
        """Seconds left, never negative."""
        now = now or timezone.now()
        elapsed = math.floor((now - self.start_time).total_seconds())
        return max(0, self.duration_seconds - elapsed)

    def overdue_seconds(self, now=None):
        now = now or timezone.now()
        elapsed = (now - self.start_time).total_seconds()
        return max(0.0, elapsed - self.duration_seconds)


class AccessCode(models.Model):
    """Single-use lecture unlock code."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=64, unique=True)
    is_used = models.BooleanField(default=False)
    used_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='redeemed_codes')
    used_at = models.DateTimeField(null=True, blank=True)
    lecture = models.ForeignKey(
        Lecture,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='access_codes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['is_used'], name='access_code_used_idx')]

    def __str__(self):
        return self.code
