from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from django.apps import apps
from django.contrib.auth import authenticate, get_user_model
from .permissions import IsSuperAdmin
from .serializers import (
    DeviceSerializer, LoginSerializer, RegisterSerializer, SetSystemSerializer,
    StudentSerializer, ThemeSerializer
)
from .services import AccountError, DeviceRegistry, SessionTokenHelper


class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        student = serializer.save()
        return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Password sign-in from a device; issues a token bound to that device."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = authenticate(
            request, username=data['email'].strip().lower(), password=data['password'])
        if user is None:
            return Response({'error': 'Invalid email or password.'}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            user = DeviceRegistry().register(user, data['device_id'])
        except AccountError as e:
            return Response({'error': e.message}, status=status.HTTP_403_FORBIDDEN)
        token = SessionTokenHelper.create_token(user, data['device_id'])
        return Response({'token': token, 'student': StudentSerializer(user).data})


class MeView(APIView):
    def get(self, request):
        return Response(StudentSerializer(request.user).data)


class ThemeView(APIView):
    """Current site theme. Anyone may read it; super-admins change it."""

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated(), IsSuperAdmin()]

    @property
    def theme_context(self):
        return apps.get_app_config('accounts').theme_context

    def get(self, request):
        theme = self.theme_context.current()
        return Response({'theme': theme, **self.theme_context.flags(theme)})

    def put(self, request):
        serializer = ThemeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        theme = self.theme_context.set_theme(
            serializer.validated_data['theme'], updated_by=request.user.username)
        return Response({'theme': theme, **self.theme_context.flags(theme)})


class StudentAdminViewSet(viewsets.ReadOnlyModelViewSet):
    """Super-admin student management."""
    queryset = get_user_model().objects.filter(is_staff=False).order_by('first_name', 'second_name')
    serializer_class = StudentSerializer
    permission_classes = [IsSuperAdmin]

    def get_queryset(self):
        queryset = self.queryset
        system = self.request.query_params.get('system')
        year = self.request.query_params.get('year')
        search = self.request.query_params.get('search')

        if system:
            queryset = queryset.filter(system=system)
        if year:
            queryset = queryset.filter(year=year)
        if search:
            queryset = queryset.filter(student_code=search) | queryset.filter(first_name__icontains=search)
        return queryset

    @action(detail=True, methods=['post'])
    def set_system(self, request, pk=None):
        student = self.get_object()
        serializer = SetSystemSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        student.system = serializer.validated_data['system']
        student.save(update_fields=['system'])
        return Response(StudentSerializer(student).data)

    @action(detail=True, methods=['post'])
    def remove_device(self, request, pk=None):
        student = self.get_object()
        serializer = DeviceSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        DeviceRegistry().remove(student, serializer.validated_data['device_id'])
        return Response(StudentSerializer(student).data)

    @action(detail=True, methods=['post'])
    def clear_devices(self, request, pk=None):
        student = DeviceRegistry().clear(self.get_object())
        return Response(StudentSerializer(student).data)
