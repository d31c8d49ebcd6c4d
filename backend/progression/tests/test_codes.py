import json
import os
import tempfile
from io import StringIO
from unittest.mock import patch
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import TestCase
from learning_core.tests.fixtures import make_course, make_lecture, make_student
from progression.exceptions import CodeAlreadyUsed, InvalidCode, RedeemFailed
from progression.keys import ProgressKey
from progression.models import AccessCode, ProgressRecord
from progression.services import AccessCodeService, ProgressStore


class AccessCodeServiceTests(TestCase):
    def setUp(self):
        self.student = make_student()
        self.lecture = make_lecture(make_course(), 1)
        self.key = ProgressKey.for_lecture(self.lecture)
        self.service = AccessCodeService()

    def test_redeem_unlocks_and_consumes(self):
        AccessCode.objects.create(code='ABC12345')
        record = self.service.redeem_code(self.student, ' ABC12345 ', self.key)

        self.assertTrue(record.unlocked)
        code = AccessCode.objects.get(code='ABC12345')
        self.assertTrue(code.is_used)
        self.assertEqual(code.used_by, self.student)
        self.assertEqual(code.lecture, self.lecture)
        self.assertIsNotNone(code.used_at)

    def test_code_is_single_use(self):
        AccessCode.objects.create(code='ABC12345')
        self.service.redeem_code(self.student, 'ABC12345', self.key)

        other = make_student(username='other@example.com')
        with self.assertRaisesMessage(CodeAlreadyUsed, "This code is already used."):
            self.service.redeem_code(other, 'ABC12345', self.key)
        self.assertFalse(ProgressRecord.objects.filter(student=other).exists())

    def test_unknown_code(self):
        with self.assertRaisesMessage(InvalidCode, "Invalid code."):
            self.service.redeem_code(self.student, 'NOPE', self.key)

    def test_empty_code(self):
        with self.assertRaisesMessage(InvalidCode, "Please enter a code."):
            self.service.redeem_code(self.student, '   ', self.key)

    def test_store_failure_leaves_code_unused(self):
        AccessCode.objects.create(code='ABC12345')
        with patch.object(ProgressStore, 'unlock_lecture', side_effect=DatabaseError('down')):
            with self.assertRaisesMessage(RedeemFailed, "Failed to redeem code. Please try again."):
                self.service.redeem_code(self.student, 'ABC12345', self.key)

        code = AccessCode.objects.get(code='ABC12345')
        self.assertFalse(code.is_used)
        self.assertIsNone(code.used_by)
        record = self.service.redeem_code(self.student, 'ABC12345', self.key)
        self.assertTrue(record.unlocked)

    def test_generate_codes_are_unique(self):
        codes = self.service.generate_codes(20, length=10)
        values = {c.code for c in codes}
        self.assertEqual(len(values), 20)
        self.assertTrue(all(len(v) == 10 for v in values))
        self.assertEqual(AccessCode.objects.filter(is_used=False).count(), 20)


class CommandTests(TestCase):
    def test_generate_access_codes(self):
        out = StringIO()
        call_command('generate_access_codes', '3', '--length', '8', stdout=out)
        self.assertEqual(AccessCode.objects.count(), 3)
        self.assertIn('Generated 3 codes', out.getvalue())

    def test_generate_access_codes_rejects_short_codes(self):
        with self.assertRaises(CommandError):
            call_command('generate_access_codes', '3', '--length', '4', stdout=StringIO())

    def test_export_progress(self):
        student = make_student()
        lecture = make_lecture(make_course(year='year2'), 1)
        make_lecture(make_course(year='year1', title='Chemistry'), 1)
        key = ProgressKey.for_lecture(lecture)
        ProgressStore().mark_quiz_complete(student, key, 4, 5)

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'progress.jsonl')
            out = StringIO()
            call_command('export_progress', '--year', 'year2', '--outfile', path, stdout=out)
            with open(path) as fh:
                rows = [json.loads(line) for line in fh]

        self.assertIn('Exported 1 progress records', out.getvalue())
        self.assertEqual(len(rows), 1)
        self.assertEqual(ProgressKey.decode(rows[0]['key']), key)
        self.assertTrue(rows[0]['quiz_completed'])
        self.assertEqual(rows[0]['earned_marks'], 4)
