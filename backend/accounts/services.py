import logging
import secrets
import time
import uuid
import jwt
import redis
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import transaction
from .models import SiteSetting

logger = logging.getLogger(__name__)

THEMES = ('default', 'halloween', 'christmas', 'ramadan')
THEME_SETTING_KEY = 'theme'
THEME_CACHE_KEY = 'site:theme'


class AccountError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class DeviceLimitReached(AccountError):
    def __init__(self, limit):
        super().__init__(
            f"This account is already signed in on {limit} devices. "
            "Ask an administrator to remove a device.")


class InvalidSessionToken(AccountError):
    pass


class InvalidTheme(AccountError):
    pass


def generate_student_code():
    """Six-digit code printed on the student's card and scanned for attendance."""
    User = get_user_model()
    while True:
        code = str(100000 + secrets.randbelow(900000))
        if not User.objects.filter(student_code=code).exists():
            return code


class DeviceRegistry:
    """The device identifiers a student may sign in from. Staff are not limited."""

    def __init__(self, limit=None):
        self.limit = limit or getattr(settings, 'MAX_DEVICES_PER_STUDENT', 2)

    def register(self, student, device_id):
        if student.is_staff:
            return student
        User = get_user_model()
        with transaction.atomic():
            locked = User.objects.select_for_update().get(pk=student.pk)
            devices = list(locked.devices or [])
            if device_id in devices:
                return locked
            if len(devices) >= self.limit:
                raise DeviceLimitReached(self.limit)
            locked.devices = devices + [device_id]
            locked.save(update_fields=['devices'])
        logger.info("Registered device for %s (%d/%d)", student.pk, len(locked.devices), self.limit)
        return locked

    def is_registered(self, student, device_id):
        return student.is_staff or device_id in (student.devices or [])

    def remove(self, student, device_id):
        student.devices = [d for d in student.devices or [] if d != device_id]
        student.save(update_fields=['devices'])
        return student

    def clear(self, student):
        student.devices = []
        student.save(update_fields=['devices'])
        return student


class SessionTokenHelper:
    """Signed session tokens bound to the device they were issued for."""
    ALGORITHM = 'HS256'

    @staticmethod
    def create_token(student, device_id, exp_seconds=None, secret=None):
        now = int(time.time())
        ttl = exp_seconds or getattr(settings, 'SESSION_TOKEN_TTL_SECONDS', 60 * 60 * 24 * 5)
        payload = {
            'sub': str(student.pk),
            'aud': getattr(settings, 'SESSION_TOKEN_AUDIENCE', 'lecture-app'),
            'did': device_id,
            'iat': now,
            'exp': now + ttl,
            'jti': uuid.uuid4().hex,
        }
        return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm=SessionTokenHelper.ALGORITHM)

    @staticmethod
    def validate_token(token, secret=None):
        try:
            return jwt.decode(
                token,
                secret or settings.SECRET_KEY,
                algorithms=[SessionTokenHelper.ALGORITHM],
                audience=getattr(settings, 'SESSION_TOKEN_AUDIENCE', 'lecture-app'))
        except jwt.ExpiredSignatureError:
            raise InvalidSessionToken("Your session has expired. Please sign in again.")
        except jwt.PyJWTError:
            raise InvalidSessionToken("Invalid session token.")


def log_theme_change(theme):
    logger.info("Site theme is now %s", theme)


def publish_theme_change(theme):
    """Tell other processes the theme changed. Returns False when not published."""
    redis_url = getattr(settings, 'REDIS_URL', None)
    if not redis_url:
        return False
    try:
        r = redis.from_url(redis_url)
        r.publish(getattr(settings, 'THEME_CHANNEL', 'site_theme'), theme)
    except redis.RedisError:
        logger.exception("Could not publish theme change")
        return False
    return True


class ThemeContext:
    """
    The active site theme, with change notification.

    ``subscribe`` registers a callback run with the new theme whenever it
    changes in this process. Changes made elsewhere arrive through the Redis
    channel and the ``listen_theme_changes`` command.
    """

    def __init__(self, publisher=None):
        self._subscribers = []
        self.publisher = publisher or publish_theme_change

    def current(self):
        theme = cache.get(THEME_CACHE_KEY)
        if theme is None:
            setting = SiteSetting.objects.filter(key=THEME_SETTING_KEY).first()
            theme = (setting.value or {}).get('name') if setting else None
            if theme not in THEMES:
                theme = 'default'
            cache.set(THEME_CACHE_KEY, theme, getattr(settings, 'THEME_CACHE_TTL', 300))
        return theme

    def flags(self, theme=None):
        theme = theme or self.current()
        return {f'is_{name}': theme == name for name in THEMES}

    def subscribe(self, callback):
        """Returns a callable that removes the subscription."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def set_theme(self, theme, updated_by=''):
        if theme not in THEMES:
            raise InvalidTheme(f"Unknown theme: {theme}")
        SiteSetting.objects.update_or_create(
            key=THEME_SETTING_KEY,
            defaults={'value': {'name': theme}, 'updated_by': updated_by})
        cache.set(THEME_CACHE_KEY, theme, getattr(settings, 'THEME_CACHE_TTL', 300))
        self.notify(theme)
        self.publisher(theme)
        return theme

    def received(self, theme):
        """Apply a change published by another process."""
        cache.delete(THEME_CACHE_KEY)
        self.notify(self.current())

    def notify(self, theme):
        for callback in list(self._subscribers):
            callback(theme)
