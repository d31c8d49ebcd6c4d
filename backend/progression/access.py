from typing import NamedTuple, Optional

NEEDS_CODE = "Enter an access code to unlock this lecture."
PREVIOUS_LOCKED = "Unlock the previous lecture first."
PREVIOUS_QUIZ = "Pass the previous lecture's quiz to unlock this lecture."
PREVIOUS_HOMEWORK = "Submit the previous lecture's homework to unlock this lecture."
EXPIRED = "This lecture has expired."
UNAVAILABLE = "This lecture is not available."


class LectureAccess(NamedTuple):
    locked: bool
    lock_reason: Optional[str] = None
    can_unlock_with_code: bool = False


UNLOCKED = LectureAccess(locked=False)


def _flag(record, name):
    return bool(record is not None and getattr(record, name, False))


def _code_gate(progress):
    if _flag(progress, 'unlocked'):
        return UNLOCKED
    return LectureAccess(locked=True, lock_reason=NEEDS_CODE, can_unlock_with_code=True)


def _prerequisites(prior_lecture, prior_progress, prior_homework_progress, require_unlocked):
    """Lock reason for the first unmet condition on the previous lecture, or None."""
    if require_unlocked and not _flag(prior_progress, 'unlocked'):
        return PREVIOUS_LOCKED
    if prior_lecture.has_quiz and not _flag(prior_progress, 'quiz_completed'):
        return PREVIOUS_QUIZ
    if prior_lecture.has_homework and not _flag(prior_homework_progress, 'homework_completed'):
        return PREVIOUS_HOMEWORK
    return None


def resolve_access(lecture, index, prior_lecture, progress, prior_progress,
                   homework_progress, prior_homework_progress, cohort):
    """
    Decide whether ``lecture`` (at position ``index`` in its course) is open
    to a student of ``cohort``.

    Progress arguments are the student's records (or None when absent).
    Lectures only need ``has_quiz``, ``has_homework`` and ``is_enabled_for``.
    ``homework_progress`` is accepted for symmetry with the other records;
    a lecture's own homework never gates it.

    The first lecture is open to the school cohort and otherwise needs a
    redeemed code. Later lectures need the previous quiz and homework done;
    other cohorts also need the previous lecture unlocked and a code for this
    one. The lock reason names the first unmet condition and the code box is
    offered only when nothing but the code is missing.
    """
    if index == 0:
        access = UNLOCKED if cohort == 'school' else _code_gate(progress)
    else:
        reason = _prerequisites(
            prior_lecture, prior_progress, prior_homework_progress,
            require_unlocked=cohort != 'school')
        if reason:
            access = LectureAccess(locked=True, lock_reason=reason)
        elif cohort == 'school':
            access = UNLOCKED
        else:
            access = _code_gate(progress)

    if not access.locked:
        enabled = lecture.is_enabled_for(cohort) and getattr(progress, 'is_enabled', True)
        if not enabled:
            access = LectureAccess(locked=True, lock_reason=EXPIRED)
    return access
