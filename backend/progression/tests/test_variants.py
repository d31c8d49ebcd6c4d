import random
from django.test import SimpleTestCase
from progression.variants import get_unused_quiz_variant


class VariantSelectionTests(SimpleTestCase):
    def test_unused_variants_come_first(self):
        rng = random.Random(3)
        for _ in range(20):
            self.assertEqual(get_unused_quiz_variant(['variant1', 'variant3'], rng=rng), 'variant2')

    def test_fresh_student_gets_any_variant(self):
        rng = random.Random(7)
        seen = {get_unused_quiz_variant([], rng=rng) for _ in range(50)}
        self.assertEqual(seen, {'variant1', 'variant2', 'variant3'})

    def test_all_used_falls_back_to_any(self):
        rng = random.Random(11)
        seen = {get_unused_quiz_variant(['variant1', 'variant2', 'variant3'], rng=rng) for _ in range(50)}
        self.assertEqual(seen, {'variant1', 'variant2', 'variant3'})

    def test_restricted_to_available_variants(self):
        self.assertEqual(get_unused_quiz_variant([], ['variant2']), 'variant2')
        self.assertEqual(get_unused_quiz_variant(None, ['variant2']), 'variant2')
