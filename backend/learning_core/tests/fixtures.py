from django.contrib.auth import get_user_model
from learning_core.models import Course, Lecture, Question, QuizSetting

User = get_user_model()


def make_student(username='student@example.com', system='online', year='year1', **extra):
    return User.objects.create_user(
        username=username, email=username, password='secret123',
        system=system, year=year, **extra)


def make_course(year='year1', title='Biology'):
    return Course.objects.create(year=year, title=title)


def make_lecture(course, order, title=None, **extra):
    return Lecture.objects.create(course=course, order=order, title=title or f'Lecture {order}', **extra)


def add_mcqs(lecture, question_set, count, correct_index=0):
    return [
        Question.objects.create(
            lecture=lecture,
            question_set=question_set,
            question_type='mcq',
            text=f'{question_set} question {i}',
            options=['A', 'B', 'C', 'D'],
            correct_answer_index=correct_index,
            order_index=i)
        for i in range(count)
    ]


def add_essays(lecture, question_set, count):
    return [
        Question.objects.create(
            lecture=lecture,
            question_set=question_set,
            question_type='essay',
            text=f'{question_set} essay {i}',
            order_index=100 + i)
        for i in range(count)
    ]


def add_quiz(lecture, mcqs_per_variant=5, essays=1, duration_minutes=10):
    QuizSetting.objects.create(lecture=lecture, duration_minutes=duration_minutes)
    for variant in ('variant1', 'variant2', 'variant3'):
        add_mcqs(lecture, variant, mcqs_per_variant)
    add_essays(lecture, 'essay', essays)
