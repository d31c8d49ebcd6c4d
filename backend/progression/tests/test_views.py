from unittest.mock import patch
from rest_framework import status
from rest_framework.test import APITestCase
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from learning_core.tests.fixtures import add_quiz, make_course, make_lecture, make_student
from progression.access import EXPIRED, NEEDS_CODE, PREVIOUS_LOCKED
from progression.keys import ProgressKey
from progression.models import AccessCode, ProgressRecord, QuizAttemptTimer
from progression.services import ProgressStore


class StudentProgressViewTests(APITestCase):
    def setUp(self):
        self.student = make_student(system='online')
        self.client.force_authenticate(user=self.student)
        self.course = make_course()
        self.first = make_lecture(self.course, 1)
        self.second = make_lecture(self.course, 2)
        add_quiz(self.first, mcqs_per_variant=4, essays=0)
        AccessCode.objects.create(code='FIRSTCODE')

    def redeem(self, lecture, code='FIRSTCODE'):
        return self.client.post('/api/progress/redeem/', {'code': code, 'lecture_id': str(lecture.id)},
                                format='json')

    def test_lecture_list_reports_lock_state(self):
        resp = self.client.get(f'/api/progress/courses/{self.course.id}/lectures/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        first, second = resp.json()
        self.assertTrue(first['locked'])
        self.assertEqual(first['lock_reason'], NEEDS_CODE)
        self.assertTrue(first['can_unlock_with_code'])
        self.assertTrue(first['lecture']['has_quiz'])
        self.assertEqual(second['lock_reason'], PREVIOUS_LOCKED)
        self.assertFalse(second['can_unlock_with_code'])

    def test_redeem_refused_while_prerequisites_missing(self):
        resp = self.redeem(self.second)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()['error'], PREVIOUS_LOCKED)
        self.assertFalse(AccessCode.objects.get(code='FIRSTCODE').is_used)

    def test_redeem_invalid_code(self):
        resp = self.redeem(self.first, code='WRONG')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()['error'], "Invalid code.")

    def test_redeem_then_pass_quiz(self):
        resp = self.redeem(self.first)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()['unlocked'])

        resp = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/start/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        body = resp.json()
        self.assertEqual(body['state'], 'in_progress')
        self.assertEqual(body['remaining_seconds'], 600)
        self.assertEqual(len(body['questions']), 4)
        self.assertNotIn('correct_answer_index', body['questions'][0])

        answers = {q['id']: 0 for q in body['questions']}
        resp = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/submit/',
                                {'mcq_answers': answers}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()['passed'])
        self.assertEqual(resp.json()['score'], 4)

        resp = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/submit/',
                                {'mcq_answers': answers}, format='json')
        self.assertTrue(resp.json()['ignored'])
        self.assertTrue(resp.json()['progress']['quiz_completed'])

        resp = self.client.get(f'/api/progress/courses/{self.course.id}/summary/')
        self.assertEqual(resp.json()['quizzes_completed'], 1)
        self.assertEqual(resp.json()['total_quizzes'], 1)
        self.assertEqual(resp.json()['percentage'], 100)

        resp = self.client.get(f'/api/progress/lectures/{self.second.id}/')
        self.assertEqual(resp.json()['lock_reason'], NEEDS_CODE)
        self.assertTrue(resp.json()['can_unlock_with_code'])

    def test_quiz_start_on_locked_lecture(self):
        resp = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/start/')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()['error'], NEEDS_CODE)
        self.assertFalse(QuizAttemptTimer.objects.exists())

    def test_quiz_start_after_all_attempts_used(self):
        ProgressRecord.objects.create(student=self.student, lecture=self.first, unlocked=True, attempts=3)
        resp = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/start/')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('maximum number of attempts (3)', resp.json()['error'])

    def test_submit_without_attempt_is_ignored(self):
        ProgressRecord.objects.create(student=self.student, lecture=self.first, unlocked=True)
        resp = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/submit/', {}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()['ignored'])

    def test_submit_refused_after_access_revoked(self):
        self.redeem(self.first)
        start = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/start/').json()
        ProgressStore().set_enabled(self.student, ProgressKey.for_lecture(self.first), False)

        answers = {q['id']: 0 for q in start['questions']}
        resp = self.client.post(f'/api/progress/lectures/{self.first.id}/quiz/submit/',
                                {'mcq_answers': answers}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()['error'], EXPIRED)
        record = ProgressRecord.objects.get(student=self.student, lecture=self.first)
        self.assertFalse(record.quiz_completed)
        self.assertTrue(QuizAttemptTimer.objects.exists())

    def test_redeem_store_failure(self):
        with patch.object(ProgressStore, 'unlock_lecture', side_effect=DatabaseError('down')):
            resp = self.redeem(self.first)
        self.assertEqual(resp.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(resp.json()['error'], "Failed to redeem code. Please try again.")
        self.assertFalse(AccessCode.objects.get(code='FIRSTCODE').is_used)


class ReviewViewTests(APITestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_superuser(
            username='owner@example.com', email='owner@example.com', password='secret123')
        self.student = make_student(first_name='Mona', second_name='Ali', student_code='111222')
        self.lecture = make_lecture(make_course(), 1)
        ProgressRecord.objects.create(
            student=self.student, lecture=self.lecture, unlocked=True,
            attempts=3, used_variants=['variant1', 'variant2', 'variant3'])
        self.base = f'/api/progress/admin/lectures/{self.lecture.id}/students/'

    def test_requires_super_admin(self):
        self.client.force_authenticate(user=self.student)
        resp = self.client.get(self.base)
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_review_lists_records(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.get(self.base)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        row = resp.json()[0]
        self.assertEqual(row['student_code'], '111222')
        self.assertEqual(row['attempts'], 3)
        self.assertFalse(row['homework_completed'])
        self.assertIsNone(row['homework_score'])

    def test_toggle_expires_lecture_for_student(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post(f'{self.base}{self.student.id}/toggle/', {'is_enabled': False}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(ProgressRecord.objects.get(student=self.student).is_enabled)

        self.client.force_authenticate(user=self.student)
        resp = self.client.get(f'/api/progress/lectures/{self.lecture.id}/')
        self.assertTrue(resp.json()['locked'])
        self.assertEqual(resp.json()['lock_reason'], "This lecture has expired.")

    def test_reset_attempts(self):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post(f'{self.base}{self.student.id}/reset-attempts/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        record = ProgressRecord.objects.get(student=self.student)
        self.assertEqual(record.attempts, 0)
        self.assertTrue(record.unlocked)
