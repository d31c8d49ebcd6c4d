from django.core.management.base import BaseCommand, CommandError
from progression.services import AccessCodeService


class Command(BaseCommand):
    help = 'Generate single-use lecture access codes'

    def add_arguments(self, parser):
        parser.add_argument('count', type=int)
        parser.add_argument('--length', type=int, default=8)

    def handle(self, *args, **options):
        if options['count'] <= 0:
            raise CommandError('count must be positive')
        if options['length'] < 6:
            raise CommandError('codes shorter than 6 characters are too easy to guess')

        codes = AccessCodeService().generate_codes(options['count'], length=options['length'])
        for code in codes:
            self.stdout.write(code.code)
        self.stdout.write(self.style.SUCCESS(f'Generated {len(codes)} codes'))
