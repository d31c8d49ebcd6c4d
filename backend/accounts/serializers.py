from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from .services import THEMES, generate_student_code

User = get_user_model()


class StudentSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'second_name', 'third_name', 'fourth_name',
            'full_name', 'phone', 'parent_phone', 'student_code', 'system', 'year', 'devices',
            'is_staff', 'is_superuser', 'date_joined',
        ]
        read_only_fields = ['student_code', 'devices', 'is_staff', 'is_superuser', 'date_joined']


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = [
            'email', 'password', 'confirm_password', 'first_name', 'second_name', 'third_name',
            'fourth_name', 'phone', 'parent_phone', 'system', 'year',
        ]
        extra_kwargs = {
            'email': {'required': True, 'allow_blank': False},
            'first_name': {'required': True, 'allow_blank': False},
            'year': {'required': True, 'allow_blank': False},
        }

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs.pop('confirm_password'):
            raise serializers.ValidationError({'confirm_password': "Passwords do not match!"})
        validate_password(attrs['password'])
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(username=validated_data['email'], student_code=generate_student_code(), **validated_data)
        user.set_password(password)
        user.save()
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True)
    device_id = serializers.CharField(max_length=100)


class SetSystemSerializer(serializers.Serializer):
    system = serializers.ChoiceField(choices=User.SYSTEM_CHOICES)


class DeviceSerializer(serializers.Serializer):
    device_id = serializers.CharField(max_length=100)


class ThemeSerializer(serializers.Serializer):
    theme = serializers.ChoiceField(choices=THEMES)
