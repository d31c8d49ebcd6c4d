from unittest.mock import patch
from django.db import DatabaseError
from django.test import TestCase
from homework.models import HomeworkDraft, HomeworkSubmission
from homework.services import (
    DraftAutosaver, HomeworkAlreadySubmitted, HomeworkIncomplete, HomeworkService,
    HomeworkSubmissionFailed, HomeworkUnavailable, has_any_answer
)
from learning_core.tests.fixtures import add_essays, add_mcqs, make_course, make_lecture, make_student


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class HomeworkServiceTests(TestCase):
    def setUp(self):
        self.student = make_student()
        self.lecture = make_lecture(make_course(), 1)
        self.mcqs = add_mcqs(self.lecture, 'homework', 3, correct_index=1)
        self.essay = add_essays(self.lecture, 'homework', 1)[0]
        self.service = HomeworkService(self.student, self.lecture)

    def complete_answers(self):
        return [1, 1, 0], {str(self.essay.pk): 'Cells divide.'}

    def test_has_any_answer(self):
        self.assertFalse(has_any_answer([-1, -1], {}))
        self.assertFalse(has_any_answer([], {'x': '   '}))
        self.assertTrue(has_any_answer([-1, 2], {}))
        self.assertTrue(has_any_answer([], {'x': 'text'}))

    def test_empty_draft_is_not_saved(self):
        self.assertIsNone(self.service.save_draft([-1, -1, -1], {str(self.essay.pk): ''}))
        self.assertFalse(HomeworkDraft.objects.exists())

    def test_draft_save_and_restore(self):
        self.service.save_draft([2, -1, -1], {})
        self.service.save_draft([2, 0, -1], {str(self.essay.pk): 'half'})
        self.assertEqual(HomeworkDraft.objects.count(), 1)

        restored = self.service.restore_draft()
        self.assertEqual(restored['mcq_answers'], [2, 0, -1])
        self.assertEqual(restored['essay_answers'], {str(self.essay.pk): 'half'})
        self.assertIsNotNone(restored['last_saved'])

    def test_draft_ignored_when_question_count_changed(self):
        self.service.save_draft([2, 0, 1], {str(self.essay.pk): 'kept?'})
        add_mcqs(self.lecture, 'homework', 1)

        restored = HomeworkService(self.student, self.lecture).restore_draft()
        self.assertEqual(restored['mcq_answers'], [-1, -1, -1, -1])
        self.assertEqual(restored['essay_answers'], {})

    def test_missing_mcq_message(self):
        with self.assertRaises(HomeworkIncomplete) as ctx:
            self.service.validate([1, -1, -1], {str(self.essay.pk): 'text'})
        self.assertEqual(
            ctx.exception.message,
            "Please answer all 3 multiple choice questions. You have answered 1 out of 3.")

    def test_missing_essay_message(self):
        with self.assertRaises(HomeworkIncomplete) as ctx:
            self.service.validate([1, 1, 1], {str(self.essay.pk): '  '})
        self.assertEqual(
            ctx.exception.message,
            "Please answer all 1 essay questions. You have answered 0 out of 1.")

    def test_submit_grades_and_clears_draft(self):
        self.service.save_draft([1, -1, -1], {})
        mcq, essay = self.complete_answers()
        submission = self.service.submit(mcq, essay)

        self.assertTrue(submission.homework_completed)
        self.assertEqual((submission.score, submission.total), (2, 3))
        self.assertEqual(submission.answers['essay'][0]['answer_text'], 'Cells divide.')
        self.assertFalse(HomeworkDraft.objects.exists())

    def test_second_submit_rejected_before_write(self):
        mcq, essay = self.complete_answers()
        self.service.submit(mcq, essay)
        with self.assertRaisesMessage(HomeworkAlreadySubmitted, "You have already submitted this homework."):
            self.service.submit(mcq, essay)
        self.assertEqual(HomeworkSubmission.objects.count(), 1)

    def test_draft_delete_failure_does_not_fail_submission(self):
        self.service.save_draft([1, -1, -1], {})
        mcq, essay = self.complete_answers()
        with patch.object(HomeworkDraft.objects, 'filter', side_effect=DatabaseError('down')):
            submission = self.service.submit(mcq, essay)
        self.assertTrue(submission.homework_completed)
        self.assertTrue(HomeworkDraft.objects.exists())

    def test_store_failure_on_submit(self):
        self.service.save_draft([1, -1, -1], {})
        mcq, essay = self.complete_answers()
        with patch.object(HomeworkSubmission.objects, 'create', side_effect=DatabaseError('down')):
            with self.assertRaisesMessage(HomeworkSubmissionFailed, "Failed to submit homework. Please try again."):
                self.service.submit(mcq, essay)
        self.assertFalse(HomeworkSubmission.objects.exists())
        self.assertTrue(HomeworkDraft.objects.exists())

    def test_lecture_without_homework(self):
        other = make_lecture(self.lecture.course, 2)
        with self.assertRaises(HomeworkUnavailable):
            HomeworkService(self.student, other).ensure_open()


class DraftAutosaverTests(TestCase):
    def setUp(self):
        self.student = make_student()
        self.lecture = make_lecture(make_course(), 1)
        add_mcqs(self.lecture, 'homework', 2)
        self.clock = FakeClock()
        self.autosaver = DraftAutosaver(
            HomeworkService(self.student, self.lecture), delay=2, clock=self.clock)

    def test_waits_for_quiet_period(self):
        self.autosaver.change([0, -1], {})
        self.clock.now = 1.5
        self.autosaver.change([0, 1], {})
        self.clock.now = 3.0
        self.assertIsNone(self.autosaver.flush_due())
        self.assertFalse(HomeworkDraft.objects.exists())

        self.clock.now = 3.6
        draft = self.autosaver.flush_due()
        self.assertEqual(draft.mcq_answers, [0, 1])
        self.assertFalse(self.autosaver.pending)

    def test_flush_forces_write(self):
        self.autosaver.change([1, -1], {})
        self.assertTrue(self.autosaver.pending)
        self.assertIsNotNone(self.autosaver.flush())
        self.assertIsNone(self.autosaver.flush())

    def test_empty_change_writes_nothing(self):
        self.autosaver.change([-1, -1], {})
        self.clock.now = 10
        self.assertIsNone(self.autosaver.flush_due())
        self.assertFalse(HomeworkDraft.objects.exists())
