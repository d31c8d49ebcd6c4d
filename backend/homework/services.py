import logging
import time
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from auto_grading.grader import AutoGrader, normalize_selection
from .models import HomeworkDraft, HomeworkSubmission

logger = logging.getLogger(__name__)


class HomeworkError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class HomeworkUnavailable(HomeworkError):
    def __init__(self, message="This lecture has no homework."):
        super().__init__(message)


class HomeworkAlreadySubmitted(HomeworkError):
    def __init__(self, message="You have already submitted this homework."):
        super().__init__(message)


class HomeworkSubmissionFailed(HomeworkError):
    def __init__(self, message="Failed to submit homework. Please try again."):
        super().__init__(message)


class HomeworkIncomplete(HomeworkError):
    """Raised with the count of unanswered items per question type."""

    def __init__(self, unanswered_mcq, total_mcq, unanswered_essay, total_essay):
        self.unanswered_mcq = unanswered_mcq
        self.unanswered_essay = unanswered_essay
        if unanswered_mcq:
            answered = total_mcq - unanswered_mcq
            message = (f"Please answer all {total_mcq} multiple choice questions. "
                       f"You have answered {answered} out of {total_mcq}.")
        else:
            answered = total_essay - unanswered_essay
            message = (f"Please answer all {total_essay} essay questions. "
                       f"You have answered {answered} out of {total_essay}.")
        super().__init__(message)


def has_any_answer(mcq_answers, essay_answers):
    return (any(normalize_selection(a) != -1 for a in mcq_answers or [])
            or any((text or '').strip() for text in (essay_answers or {}).values()))


class HomeworkService:
    """
    Draft autosave, restore and one-shot submission of a lecture's homework.

    MCQ answers are a list aligned with the homework MCQs in their stored
    order, -1 meaning unanswered. Essay answers map question id to text.
    """

    def __init__(self, student, lecture, clock=None):
        self.student = student
        self.lecture = lecture
        self.clock = clock or timezone.now

    def questions(self):
        return list(self.lecture.questions.filter(question_set='homework'))

    def mcq_questions(self):
        return [q for q in self.questions() if q.question_type == 'mcq']

    def essay_questions(self):
        return [q for q in self.questions() if q.question_type == 'essay']

    def submission(self):
        return HomeworkSubmission.objects.filter(
            student=self.student, lecture=self.lecture, homework_completed=True).first()

    def ensure_open(self):
        if not self.lecture.has_homework:
            raise HomeworkUnavailable()
        if self.submission() is not None:
            raise HomeworkAlreadySubmitted()

    def save_draft(self, mcq_answers, essay_answers):
        """Persist the draft; empty drafts are not written and return None."""
        if not has_any_answer(mcq_answers, essay_answers):
            return None
        draft, _ = HomeworkDraft.objects.update_or_create(
            student=self.student,
            lecture=self.lecture,
            defaults={
                'mcq_answers': [normalize_selection(a) for a in mcq_answers or []],
                'essay_answers': {str(k): v or '' for k, v in (essay_answers or {}).items()},
                'last_saved': self.clock(),
            })
        return draft

    def restore_draft(self):
        """
        Saved answers when the draft still fits the question list, else a
        blank answer sheet. A draft whose MCQ count no longer matches is
        ignored entirely.
        """
        mcq_count = len(self.mcq_questions())
        blank = {'mcq_answers': [-1] * mcq_count, 'essay_answers': {}, 'last_saved': None}
        draft = HomeworkDraft.objects.filter(student=self.student, lecture=self.lecture).first()
        if draft is None or not isinstance(draft.mcq_answers, list) or len(draft.mcq_answers) != mcq_count:
            return blank
        return {
            'mcq_answers': list(draft.mcq_answers),
            'essay_answers': dict(draft.essay_answers or {}),
            'last_saved': draft.last_saved,
        }

    def validate(self, mcq_answers, essay_answers):
        mcqs = self.mcq_questions()
        essays = self.essay_questions()
        mcq_answers = list(mcq_answers or [])
        essay_answers = essay_answers or {}

        answered_mcq = sum(
            1 for i in range(len(mcqs))
            if i < len(mcq_answers) and normalize_selection(mcq_answers[i]) != -1)
        answered_essay = sum(
            1 for q in essays if (essay_answers.get(str(q.pk)) or '').strip())
        if answered_mcq < len(mcqs) or answered_essay < len(essays):
            raise HomeworkIncomplete(
                len(mcqs) - answered_mcq, len(mcqs), len(essays) - answered_essay, len(essays))

    def submit(self, mcq_answers, essay_answers):
        self.ensure_open()
        self.validate(mcq_answers, essay_answers)

        questions = self.questions()
        mcqs = [q for q in questions if q.question_type == 'mcq']
        selections = {str(q.pk): answer for q, answer in zip(mcqs, mcq_answers)}
        grade = AutoGrader().grade(questions, selections, {str(k): v for k, v in essay_answers.items()})
        try:
            with transaction.atomic():
                submission = HomeworkSubmission.objects.create(
                    student=self.student,
                    lecture=self.lecture,
                    score=grade['score'],
                    total=grade['total'],
                    answers={'mcq': grade['mcq'], 'essay': grade['essay']},
                    homework_completed=True,
                    submitted_at=self.clock())
        except IntegrityError:
            raise HomeworkAlreadySubmitted()
        except DatabaseError:
            logger.exception("Error submitting homework for lecture %s", self.lecture.pk)
            raise HomeworkSubmissionFailed()

        self._discard_draft()
        logger.info("Homework submitted for lecture %s: %s/%s",
                    self.lecture.pk, submission.score, submission.total)
        return submission

    def _discard_draft(self):
        try:
            HomeworkDraft.objects.filter(student=self.student, lecture=self.lecture).delete()
        except DatabaseError:
            logger.exception("Error deleting homework draft for lecture %s", self.lecture.pk)


class DraftAutosaver:
    """
    Debounces draft writes: the latest answers are saved once no further
    change has arrived for ``delay`` seconds.

    ``flush_due`` is polled by the owner; ``flush`` forces the pending write.
    This is for in-process callers that see every keystroke. The HTTP draft
    endpoint saves directly because the client debounces before sending.
    """

    def __init__(self, service, delay=None, clock=time.monotonic):
        self.service = service
        self.delay = delay if delay is not None else getattr(settings, 'HOMEWORK_AUTOSAVE_DELAY_SECONDS', 2)
        self.clock = clock
        self._pending = None
        self._changed_at = None

    @property
    def pending(self):
        return self._pending is not None

    def change(self, mcq_answers, essay_answers):
        self._pending = (list(mcq_answers or []), dict(essay_answers or {}))
        self._changed_at = self.clock()

    def flush_due(self):
        if self._pending is None or self.clock() - self._changed_at < self.delay:
            return None
        return self.flush()

    def flush(self):
        if self._pending is None:
            return None
        mcq_answers, essay_answers = self._pending
        self._pending = None
        return self.service.save_draft(mcq_answers, essay_answers)
