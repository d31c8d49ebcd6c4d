import logging
import math
import numbers
import random
import secrets
import string
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from auto_grading.grader import AutoGrader
from homework.models import HomeworkSubmission
from learning_core.models import Lecture
from learning_core.services import quiz_duration_seconds
from .access import UNAVAILABLE, UNLOCKED, LectureAccess, resolve_access
from .exceptions import (
    CodeAlreadyUsed, InvalidCode, MaxAttemptsReached, ProgressionError,
    QuizSubmissionFailed, QuizUnavailable, RedeemFailed, ValidationError
)
from .keys import ProgressKey
from .models import AccessCode, ProgressRecord, QuizAttemptTimer
from .variants import get_unused_quiz_variant

logger = logging.getLogger(__name__)

EXPIRED_NOTICE = "Your previous quiz session expired. Starting a new quiz now."
CODE_ALPHABET = string.ascii_uppercase + string.digits


def max_attempts():
    return getattr(settings, 'QUIZ_MAX_ATTEMPTS', 3)


def _is_finite_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


class ProgressStore:
    """
    Reads and writes ProgressRecords addressed by ProgressKey.

    Every write is an upsert that only touches the fields it names, so a
    write never clobbers state set by another operation.
    """

    def get_progress(self, student, key):
        """The stored record, or an unsaved zero-valued one when none exists."""
        record = ProgressRecord.objects.filter(student=student, **key.lookup()).first()
        if record is None:
            record = ProgressRecord(student=student, lecture_id=key.lecture_id)
        return record

    def mark_quiz_complete(self, student, key, earned, total):
        if not (_is_finite_number(earned) and _is_finite_number(total)):
            raise ValidationError()
        return self._upsert(
            student, key,
            quiz_completed=True,
            earned_marks=int(earned),
            total_possible_marks=int(total))

    def unlock_lecture(self, student, key):
        return self._upsert(student, key, unlocked=True)

    def record_submission(self, student, key, score, total, answers):
        return self._upsert(
            student, key,
            score=score, total=total, answers=answers, completed_at=timezone.now())

    def increment_attempt(self, student, key, variant):
        lecture = self.lecture_for(key)
        with transaction.atomic():
            record, created = ProgressRecord.objects.select_for_update().get_or_create(
                student=student,
                lecture=lecture,
                defaults={'attempts': 1, 'used_variants': [variant], 'last_variant_used': variant})
            if not created:
                record.attempts += 1
                if variant not in record.used_variants:
                    record.used_variants = list(record.used_variants) + [variant]
                record.last_variant_used = variant
                record.save(update_fields=['attempts', 'used_variants', 'last_variant_used', 'updated_at'])
        return record

    def get_quiz_attempt_info(self, student, key):
        record = self.get_progress(student, key)
        limit = max_attempts()
        return {
            'attempts': record.attempts,
            'max_attempts': limit,
            'used_variants': list(record.used_variants),
            'max_attempts_reached': record.attempts >= limit,
        }

    def set_enabled(self, student, key, enabled):
        return self._upsert(student, key, is_enabled=bool(enabled))

    def reset_attempts(self, student, key):
        return self._upsert(student, key, attempts=0, used_variants=[], last_variant_used='')

    def lecture_for(self, key):
        return Lecture.objects.select_related('course').get(
            pk=key.lecture_id, course_id=key.course_id, course__year=key.year)

    def _upsert(self, student, key, **fields):
        lecture = self.lecture_for(key)
        with transaction.atomic():
            record, created = ProgressRecord.objects.select_for_update().get_or_create(
                student=student, lecture=lecture, defaults=fields)
            if not created:
                for name, value in fields.items():
                    setattr(record, name, value)
                record.save(update_fields=list(fields) + ['updated_at'])
        return record


class QuizSessionController:
    """
    Runs one student's quiz attempt for a lecture.

    States move idle -> loading -> in_progress -> submitting -> passed/failed.
    A submission made after the timer ran out is scored exactly like a manual
    one and reported with ``timed_out`` set. Within the grace window after
    the timer runs out, ``start`` resumes the attempt with no time left so
    the pending submission can land; only a timer past the grace window is
    discarded for a fresh attempt.

    ``submit`` acts once per attempt. While a submission is in flight, or
    once the attempt's timer is gone, further calls return None.
    """

    IDLE = 'idle'
    LOADING = 'loading'
    IN_PROGRESS = 'in_progress'
    SUBMITTING = 'submitting'
    PASSED = 'passed'
    FAILED = 'failed'

    def __init__(self, student, lecture, store=None, clock=None, rng=None):
        self.student = student
        self.lecture = lecture
        self.key = ProgressKey.for_lecture(lecture)
        self.store = store or ProgressStore()
        self.clock = clock or timezone.now
        self.rng = rng or random.Random()
        self.state = self.IDLE
        self.timer = None
        self.questions = []
        self.notice = None
        self.result = None

    def start(self):
        """Resume the in-flight attempt, or begin a new one."""
        if self.state != self.IDLE:
            return self
        self.state = self.LOADING
        try:
            self._load()
        except ProgressionError:
            self.state = self.IDLE
            raise
        except DatabaseError:
            self.state = self.IDLE
            logger.exception("Error loading quiz for lecture %s", self.lecture.pk)
            raise QuizUnavailable()
        self.state = self.IN_PROGRESS
        return self

    def resume(self):
        """Attach to the in-flight attempt without ever starting a new one."""
        if self.state != self.IDLE:
            return self
        timer = QuizAttemptTimer.objects.filter(student=self.student, lecture=self.lecture).first()
        if timer is None or self._is_stale(timer, self.clock()):
            return self
        self.timer = timer
        self.questions = self._attempt_questions(timer)
        self.state = self.IN_PROGRESS
        return self

    def remaining_seconds(self):
        if self.timer is None:
            return 0
        return self.timer.remaining_seconds(self.clock())

    def submit(self, mcq_answers=None, essay_answers=None, timed_out=False):
        if self.state != self.IN_PROGRESS:
            return None
        self.state = self.SUBMITTING
        try:
            with transaction.atomic():
                timer = QuizAttemptTimer.objects.select_for_update().filter(pk=self.timer.pk).first()
                if timer is None:
                    self.state = self.IDLE
                    return None
                grade = AutoGrader().grade(self.questions, mcq_answers, essay_answers)
                answers = {'mcq': grade['mcq'], 'essay': grade['essay']}
                timer.delete()
                record = self.store.record_submission(
                    self.student, self.key, grade['score'], grade['total'], answers)
                if grade['passed']:
                    self.store.mark_quiz_complete(self.student, self.key, grade['score'], grade['total'])
                    record = self.store.unlock_lecture(self.student, self.key)
        except DatabaseError:
            self.state = self.IN_PROGRESS
            logger.exception("Error submitting quiz for lecture %s", self.lecture.pk)
            raise QuizSubmissionFailed()

        self.state = self.PASSED if grade['passed'] else self.FAILED
        self.result = {
            'state': self.state,
            'passed': grade['passed'],
            'score': grade['score'],
            'total': grade['total'],
            'required_score': grade['required_score'],
            'timed_out': bool(timed_out) or self.timer.remaining_seconds(self.clock()) <= 0,
            'attempts': record.attempts,
            'attempts_remaining': max(0, max_attempts() - record.attempts),
            'answers': answers,
        }
        logger.info("Quiz submitted for lecture %s: %s/%s (%s)",
                    self.lecture.pk, grade['score'], grade['total'], self.state)
        return self.result

    def _load(self):
        record = self.store.get_progress(self.student, self.key)
        if record.quiz_completed:
            raise QuizUnavailable("You have already passed this quiz.")
        now = self.clock()
        timer = QuizAttemptTimer.objects.filter(student=self.student, lecture=self.lecture).first()
        if timer is not None and self._is_stale(timer, now):
            # The expired attempt keeps its count; the slot opens for a new one
            timer.delete()
            timer = None
            self.notice = EXPIRED_NOTICE
        if timer is None:
            timer = self._begin_attempt(record, now)
        self.timer = timer
        self.questions = self._attempt_questions(timer)

    @staticmethod
    def _is_stale(timer, now):
        return timer.overdue_seconds(now) > getattr(settings, 'QUIZ_SUBMIT_GRACE_SECONDS', 30)

    def _begin_attempt(self, record, now):
        limit = max_attempts()
        if record.attempts >= limit:
            raise MaxAttemptsReached(limit)
        available = self.lecture.available_variants()
        if not available:
            raise QuizUnavailable("This lecture has no quiz.")

        variant = get_unused_quiz_variant(record.used_variants, available, rng=self.rng)
        order = [
            str(pk) for pk in self.lecture.questions.filter(
                question_set=variant, question_type='mcq').values_list('pk', flat=True)
        ]
        self.rng.shuffle(order)
        try:
            with transaction.atomic():
                timer = QuizAttemptTimer.objects.create(
                    student=self.student,
                    lecture=self.lecture,
                    start_time=now,
                    duration_seconds=quiz_duration_seconds(self.lecture),
                    variant=variant,
                    question_order=order)
                self.store.increment_attempt(self.student, self.key, variant)
        except IntegrityError:
            # A concurrent start created the timer first
            timer = QuizAttemptTimer.objects.get(student=self.student, lecture=self.lecture)
        return timer

    def _attempt_questions(self, timer):
        """The attempt's MCQs in their served order, then the essay set."""
        by_id = {
            str(q.pk): q for q in self.lecture.questions.filter(
                question_set=timer.variant, question_type='mcq')
        }
        mcqs = [by_id[pk] for pk in timer.question_order if pk in by_id]
        essays = list(self.lecture.questions.filter(question_set='essay', question_type='essay'))
        return mcqs + essays


class LectureProgressService:
    """Lecture list of a course, with each lecture's access resolved for one student."""

    def __init__(self, student):
        self.student = student

    def course_lectures(self, course):
        lectures = list(
            Lecture.objects.with_availability().visible()
            .filter(course=course).select_related('course').order_by('order'))
        progress = {
            r.lecture_id: r for r in ProgressRecord.objects.filter(
                student=self.student, lecture__course=course)
        }
        homework = {
            h.lecture_id: h for h in HomeworkSubmission.objects.filter(
                student=self.student, lecture__course=course)
        }

        entries = []
        for index, lecture in enumerate(lectures):
            prior = lectures[index - 1] if index else None
            prior_id = prior.pk if prior else None
            if self.student.is_staff:
                access = UNLOCKED
            else:
                access = resolve_access(
                    lecture, index, prior,
                    progress.get(lecture.pk), progress.get(prior_id),
                    homework.get(lecture.pk), homework.get(prior_id),
                    self.student.system)
            entries.append({
                'lecture': lecture,
                'access': access,
                'progress': progress.get(lecture.pk),
                'homework': homework.get(lecture.pk),
            })
        return entries

    def lecture_access(self, lecture):
        if self.student.is_staff:
            return UNLOCKED
        for entry in self.course_lectures(lecture.course):
            if entry['lecture'].pk == lecture.pk:
                return entry['access']
        return LectureAccess(locked=True, lock_reason=UNAVAILABLE)

    def course_summary(self, course):
        entries = self.course_lectures(course)
        quizzes = [e for e in entries if e['lecture'].has_quiz]
        homework = [e for e in entries if e['lecture'].has_homework]
        completed = sum(1 for e in quizzes if e['progress'] and e['progress'].quiz_completed)
        submitted = sum(1 for e in homework if e['homework'] and e['homework'].homework_completed)
        return {
            'course': str(course.pk),
            'quizzes_completed': completed,
            'total_quizzes': len(quizzes),
            'percentage': round(completed / len(quizzes) * 100) if quizzes else 0,
            'homework_completed': submitted,
            'total_homework': len(homework),
        }


class AccessCodeService:
    """Single-use codes that unlock a lecture for the student redeeming them."""

    def __init__(self, store=None, clock=None):
        self.store = store or ProgressStore()
        self.clock = clock or timezone.now

    def redeem_code(self, student, code, key):
        code = (code or '').strip()
        if not code:
            raise InvalidCode("Please enter a code.")
        lecture = self.store.lecture_for(key)

        try:
            with transaction.atomic():
                access_code = AccessCode.objects.select_for_update().filter(code=code).first()
                if access_code is None:
                    raise InvalidCode()
                if access_code.is_used:
                    raise CodeAlreadyUsed()
                access_code.is_used = True
                access_code.used_by = student
                access_code.used_at = self.clock()
                access_code.lecture = lecture
                access_code.save(update_fields=['is_used', 'used_by', 'used_at', 'lecture'])
                record = self.store.unlock_lecture(student, key)
        except DatabaseError:
            logger.exception("Error redeeming code for lecture %s", lecture.pk)
            raise RedeemFailed()

        logger.info("Code %s redeemed by %s for lecture %s", access_code.pk, student.pk, lecture.pk)
        return record

    def generate_codes(self, count, length=8):
        created = []
        while len(created) < count:
            value = ''.join(secrets.choice(CODE_ALPHABET) for _ in range(length))
            if AccessCode.objects.filter(code=value).exists():
                continue
            created.append(AccessCode.objects.create(code=value))
        return created


class LectureReviewService:
    """Admin view over every student's progress on one lecture."""

    def __init__(self, lecture, store=None):
        self.lecture = lecture
        self.key = ProgressKey.for_lecture(lecture)
        self.store = store or ProgressStore()

    def records(self):
        return (ProgressRecord.objects.filter(lecture=self.lecture)
                .select_related('student').order_by('student__first_name', 'student__second_name'))

    def homework_by_student(self):
        return {
            h.student_id: h for h in HomeworkSubmission.objects.filter(lecture=self.lecture)
        }

    def toggle(self, student, enabled):
        logger.info("Setting lecture %s enabled=%s for %s", self.lecture.pk, enabled, student.pk)
        return self.store.set_enabled(student, self.key, enabled)

    def reset_attempts(self, student):
        """Give a student who used every attempt a fresh set."""
        QuizAttemptTimer.objects.filter(student=student, lecture=self.lecture).delete()
        logger.info("Resetting quiz attempts on lecture %s for %s", self.lecture.pk, student.pk)
        return self.store.reset_attempts(student, self.key)
