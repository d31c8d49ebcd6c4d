from django.core.management.base import BaseCommand
from progression.models import ProgressRecord
import json


class Command(BaseCommand):
    help = 'Export student progress records as JSON lines, one per student and lecture'

    def add_arguments(self, parser):
        parser.add_argument('--year', type=str, help='only lectures of courses in this year')
        parser.add_argument('--course', type=str, help='course id')
        parser.add_argument('--outfile', type=str, help='file to write', default='progress_export.jsonl')

    def handle(self, *args, **options):
        qs = ProgressRecord.objects.select_related('student', 'lecture__course')
        if options.get('year'):
            qs = qs.filter(lecture__course__year=options['year'])
        if options.get('course'):
            qs = qs.filter(lecture__course_id=options['course'])

        count = 0
        with open(options['outfile'], 'w') as fh:
            for record in qs.order_by('student__username', 'lecture__course', 'lecture__order'):
                obj = {
                    'key': record.key.encode(),
                    'student': str(record.student_id),
                    'student_code': record.student.student_code,
                    'unlocked': record.unlocked,
                    'quiz_completed': record.quiz_completed,
                    'earned_marks': record.earned_marks,
                    'total_possible_marks': record.total_possible_marks,
                    'attempts': record.attempts,
                    'used_variants': record.used_variants,
                    'is_enabled': record.is_enabled,
                    'completed_at': record.completed_at.isoformat() if record.completed_at else None,
                }
                fh.write(json.dumps(obj) + '\n')
                count += 1
        self.stdout.write(self.style.SUCCESS(f'Exported {count} progress records'))
