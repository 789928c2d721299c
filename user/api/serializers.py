from django.contrib.auth import get_user_model
from rest_framework import serializers

from user.models import UserRole

User = get_user_model()


class UserRoleSerializer(serializers.ModelSerializer):
    role_display = serializers.CharField(source='get_role_display', read_only=True)
    club_name = serializers.CharField(source='club.name', read_only=True, allow_null=True)

    class Meta:
        model = UserRole
        fields = ['id', 'role', 'role_display', 'club', 'club_name']
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    roles = UserRoleSerializer(source='role_grants', many=True, read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'full_name', 'roles']
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(required=True, write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        email = attrs.get('email')
        password = attrs.get('password')

        user = User._default_manager.filter(email__iexact=email).first()
        if not user or not user.check_password(password):
            raise serializers.ValidationError({
                'email': 'Invalid email or password.'
            })

        if not user.is_active:
            raise serializers.ValidationError({
                'email': 'This account is disabled.'
            })

        attrs['user'] = user
        return attrs
