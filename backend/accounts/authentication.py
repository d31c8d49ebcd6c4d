from django.contrib.auth import get_user_model
from rest_framework import authentication, exceptions
from .services import DeviceRegistry, InvalidSessionToken, SessionTokenHelper


class DeviceTokenAuthentication(authentication.BaseAuthentication):
    """
    ``Authorization: Bearer <token>``. The token's device must still be in
    the student's device list, so removing a device signs it out.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed('Invalid authorization header.')

        try:
            payload = SessionTokenHelper.validate_token(header[1].decode())
        except (InvalidSessionToken, UnicodeError) as e:
            raise exceptions.AuthenticationFailed(getattr(e, 'message', 'Invalid session token.'))

        User = get_user_model()
        user = User.objects.filter(pk=payload.get('sub'), is_active=True).first()
        if user is None:
            raise exceptions.AuthenticationFailed('User not found.')
        if not DeviceRegistry().is_registered(user, payload.get('did')):
            raise exceptions.AuthenticationFailed('This device has been signed out.')
        return user, payload

    def authenticate_header(self, request):
        return self.keyword
