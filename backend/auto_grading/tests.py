from types import SimpleNamespace
from django.test import SimpleTestCase
from .grader import AutoGrader, is_passing, normalize_selection, required_passing_score


def mcq(pk, correct, options=('A', 'B', 'C', 'D')):
    return SimpleNamespace(id=pk, question_type='mcq', text=f'Q{pk}',
                           options=list(options), correct_answer_index=correct)


def essay(pk):
    return SimpleNamespace(id=pk, question_type='essay', text=f'E{pk}', options=[], correct_answer_index=None)


class PassingThresholdTests(SimpleTestCase):
    def test_strict_majority(self):
        self.assertEqual(required_passing_score(5), 3)
        self.assertEqual(required_passing_score(4), 3)
        self.assertEqual(required_passing_score(1), 1)
        self.assertEqual(required_passing_score(10), 6)

    def test_half_is_not_enough(self):
        self.assertFalse(is_passing(2, 4))
        self.assertTrue(is_passing(3, 4))


class AutoGraderTests(SimpleTestCase):
    def setUp(self):
        self.questions = [mcq(1, 0), mcq(2, 1), mcq(3, 2), essay(4)]

    def test_counts_correct_selections(self):
        result = AutoGrader().grade(self.questions, {'1': 0, '2': 1, '3': 0}, {'4': 'An answer'})
        self.assertEqual(result['score'], 2)
        self.assertEqual(result['total'], 3)
        self.assertEqual(result['required_score'], 2)
        self.assertTrue(result['passed'])

    def test_snapshot_records_selection_and_correct_answer(self):
        result = AutoGrader().grade(self.questions, {'1': 3}, {'4': 'Because.'})
        first = result['mcq'][0]
        self.assertEqual(first['selected_index'], 3)
        self.assertEqual(first['selected_text'], 'D')
        self.assertEqual(first['correct_answer'], 'A')
        self.assertFalse(first['is_correct'])
        self.assertEqual(result['essay'], [{'question_id': '4', 'question': 'E4', 'answer_text': 'Because.'}])

    def test_unanswered_mcq_has_no_selected_text(self):
        result = AutoGrader().grade(self.questions, {})
        self.assertEqual(result['mcq'][1]['selected_index'], -1)
        self.assertIsNone(result['mcq'][1]['selected_text'])
        self.assertEqual(result['score'], 0)
        self.assertFalse(result['passed'])

    def test_non_integer_selection_is_unanswered(self):
        self.assertEqual(normalize_selection('1'), -1)
        self.assertEqual(normalize_selection(True), -1)
        self.assertEqual(normalize_selection(None), -1)
        self.assertEqual(normalize_selection(2), 2)
