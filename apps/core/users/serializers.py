from rest_framework import serializers

from .models import User


def _identifier_field():
    return serializers.CharField(max_length=150, required=False, allow_null=True, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    role = serializers.CharField(max_length=20)
    username = _identifier_field()
    nip = _identifier_field()
    nisn = _identifier_field()
    password = serializers.CharField(trim_whitespace=False)


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'nip',
            'nisn',
            'role',
            'is_active',
            'date_joined',
            'updated_at',
        ]
        read_only_fields = fields


class UserCreateSerializer(serializers.Serializer):
    username = _identifier_field()
    nip = _identifier_field()
    nisn = _identifier_field()
    password = serializers.CharField(min_length=6, trim_whitespace=False)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)


class UserUpdateSerializer(serializers.Serializer):
    username = _identifier_field()
    nip = _identifier_field()
    nisn = _identifier_field()
    password = serializers.CharField(min_length=6, required=False, trim_whitespace=False)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
