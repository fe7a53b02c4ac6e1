from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()


class MeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='display_name', read_only=True)
    is_admin = serializers.BooleanField(source='is_portal_admin', read_only=True)

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'name', 'employee_id', 'role', 'is_admin', 'school', 'department')
        read_only_fields = fields


class IdentifierTokenObtainPairSerializer(serializers.Serializer):
    """Authenticate using `identifier` + `password` and return JWT pair.

    `identifier` may be an email (contains '@') or a faculty employee id.
    """
    identifier = serializers.CharField(write_only=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = attrs.get('identifier')
        password = attrs.get('password')

        if not identifier or not password:
            raise serializers.ValidationError('Must include "identifier" and "password".')

        if '@' in identifier:
            user = User.objects.filter(email__iexact=identifier).first()
        else:
            user = User.objects.filter(employee_id__iexact=identifier).first()

        # generic error message to avoid leaking which part failed
        invalid_msg = 'Unable to log in with provided credentials.'

        if user is None or not user.check_password(password):
            raise serializers.ValidationError(invalid_msg)

        if not user.is_active:
            raise serializers.ValidationError('User account is disabled.')

        refresh = RefreshToken.for_user(user)
        refresh['role'] = user.role
        refresh['school'] = user.school
        refresh['department'] = user.department

        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
