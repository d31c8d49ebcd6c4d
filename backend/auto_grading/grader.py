def required_passing_score(total_mcq):
    """Strict majority: floor(N/2) + 1 correct answers."""
    return total_mcq // 2 + 1


def is_passing(score, total_mcq):
    return score >= required_passing_score(total_mcq)


def normalize_selection(value):
    """Answer index as submitted, or -1 when nothing usable was selected."""
    if isinstance(value, bool) or not isinstance(value, int):
        return -1
    return value


class AutoGrader:
    """
    Scores MCQs by comparing the selected option index with the stored
    correct index. Essays are carried through ungraded.

    ``mcq_answers`` maps question id (as a string) to the selected option
    index; ``essay_answers`` maps question id to free text.
    """

    def grade(self, questions, mcq_answers=None, essay_answers=None):
        mcq_answers = mcq_answers or {}
        essay_answers = essay_answers or {}
        score = 0
        mcq_snapshot = []
        essay_snapshot = []

        for question in questions:
            key = str(question.id)
            if question.question_type == 'mcq':
                options = question.options or []
                selected = normalize_selection(mcq_answers.get(key, -1))
                correct_index = question.correct_answer_index
                is_correct = selected == correct_index
                if is_correct:
                    score += 1

                mcq_snapshot.append({
                    'question_id': key,
                    'question': question.text,
                    'selected_index': selected,
                    'selected_text': options[selected] if 0 <= selected < len(options) else None,
                    'correct_answer': self._option_text(options, correct_index),
                    'is_correct': is_correct,
                })
            else:
                essay_snapshot.append({
                    'question_id': key,
                    'question': question.text,
                    'answer_text': essay_answers.get(key, '') or '',
                })

        total = len(mcq_snapshot)
        return {
            'score': score,
            'total': total,
            'required_score': required_passing_score(total),
            'passed': is_passing(score, total),
            'mcq': mcq_snapshot,
            'essay': essay_snapshot,
        }

    @staticmethod
    def _option_text(options, index):
        if index is not None and 0 <= index < len(options):
            return options[index]
        return ''
