from django.conf import settings
from django.db import models
from django.utils import timezone
from learning_core.models import Lecture
import uuid


class HomeworkDraft(models.Model):
    """Autosaved in-progress answers. Removed once the homework is submitted."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='homework_drafts')
    lecture = models.ForeignKey(
        Lecture,
        on_delete=models.CASCADE,
        related_name='homework_drafts')
    mcq_answers = models.JSONField(default=list)
    essay_answers = models.JSONField(default=dict)
    last_saved = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = ['student', 'lecture']


class HomeworkSubmission(models.Model):
    """Final homework result. Written once per student and lecture."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='homework_submissions')
    lecture = models.ForeignKey(
        Lecture,
        on_delete=models.CASCADE,
        related_name='homework_submissions')
    score = models.IntegerField(default=0)
    total = models.IntegerField(default=0)
    answers = models.JSONField(default=dict)
    homework_completed = models.BooleanField(default=True)
    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = ['student', 'lecture']
        ordering = ['-submitted_at']

    def __str__(self):
        return f"{self.student} / {self.lecture}: {self.score}/{self.total}"
