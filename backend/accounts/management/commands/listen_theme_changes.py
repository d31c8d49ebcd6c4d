from django.apps import apps
from django.conf import settings
from django.core.management.base import BaseCommand
import redis
from accounts.services import THEMES


class Command(BaseCommand):
    help = 'Follow site theme changes published by other processes and refresh this one'

    def handle(self, *args, **options):
        redis_url = getattr(settings, 'REDIS_URL', None)
        if not redis_url:
            self.stdout.write(self.style.ERROR('REDIS_URL not configured'))
            return

        channel = getattr(settings, 'THEME_CHANNEL', 'site_theme')
        pubsub = redis.from_url(redis_url, decode_responses=True).pubsub(ignore_subscribe_messages=True)
        pubsub.subscribe(channel)
        self.stdout.write(self.style.SUCCESS(f'Following theme changes on {channel}'))

        theme_context = apps.get_app_config('accounts').theme_context
        for message in pubsub.listen():
            theme = message.get('data')
            if theme not in THEMES:
                self.stdout.write(self.style.WARNING(f'Ignoring unknown theme {theme!r}'))
                continue
            theme_context.received(theme)
            self.stdout.write(self.style.SUCCESS(f'Theme is now {theme}'))
