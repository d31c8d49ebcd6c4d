import logging
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from .models import Attendance, Question, QuizSetting, User, VARIANT_SETS, validate_question

logger = logging.getLogger(__name__)

ATTENDANCE_SYSTEMS = ('center', 'school')


class ContentError(Exception):
    """Raised when an admin content edit is rejected."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class QuizDurationNotSet(ContentError):
    def __init__(self, message="Please set the overall quiz duration first."):
        super().__init__(message)


class AttendanceError(ContentError):
    pass


def quiz_duration_seconds(lecture):
    """Duration of a quiz attempt, falling back to the configured default."""
    setting = QuizSetting.objects.filter(lecture=lecture).first()
    if setting and setting.duration_minutes > 0:
        minutes = setting.duration_minutes
    else:
        minutes = getattr(settings, 'QUIZ_DEFAULT_DURATION_MINUTES', 10)
    return minutes * 60


class LectureContentService:
    """Admin-side editing of a lecture's quiz and homework question sets."""

    def __init__(self, lecture):
        self.lecture = lecture

    def set_quiz_duration(self, minutes):
        try:
            minutes = int(minutes)
        except (TypeError, ValueError):
            minutes = 0
        if minutes <= 0:
            raise ContentError("Please enter a valid positive number for quiz duration.")
        setting, _ = QuizSetting.objects.update_or_create(
            lecture=self.lecture, defaults={'duration_minutes': minutes})
        return setting

    def add_question(self, question_set, question_type, text, options=None,
                     correct_answer_index=None, image_url=None, marks=1):
        if question_set in VARIANT_SETS or question_set == 'essay':
            if not QuizSetting.objects.filter(lecture=self.lecture).exists():
                raise QuizDurationNotSet()
        try:
            validate_question(question_set, question_type, text, options, correct_answer_index)
        except ValidationError as e:
            raise ContentError(e.messages[0])

        if question_type != 'mcq':
            options, correct_answer_index = [], None
        order_index = Question.objects.filter(
            lecture=self.lecture, question_set=question_set).count()
        return Question.objects.create(
            lecture=self.lecture,
            question_set=question_set,
            question_type=question_type,
            text=text.strip(),
            options=[str(o).strip() for o in options or []],
            correct_answer_index=correct_answer_index,
            image_url=image_url or None,
            marks=marks,
            order_index=order_index,
        )


class AttendanceService:
    """Marks students present for a lecture from a scanned student code."""

    def __init__(self, lecture):
        self.lecture = lecture

    def eligible_students(self):
        year_prefix = self.lecture.course.year.split(' ')[0]
        return User.objects.filter(
            system__in=ATTENDANCE_SYSTEMS, year=year_prefix, is_staff=False
        ).order_by('first_name', 'second_name')

    def mark(self, student_code, marked_by=''):
        """
        Returns ``(record, created)``. A student already marked present keeps
        the original record and ``created`` is False.
        """
        student_code = (student_code or '').strip()
        student = self.eligible_students().filter(student_code=student_code).first()
        if student is None:
            raise AttendanceError(f"No eligible student found with code: {student_code}")

        existing = Attendance.objects.filter(lecture=self.lecture, student=student).first()
        if existing:
            return existing, False
        try:
            with transaction.atomic():
                record = Attendance.objects.create(
                    lecture=self.lecture, student=student, marked_by=marked_by)
        except IntegrityError:
            return Attendance.objects.get(lecture=self.lecture, student=student), False
        logger.info("Attendance marked for %s on lecture %s", student.pk, self.lecture.pk)
        return record, True
