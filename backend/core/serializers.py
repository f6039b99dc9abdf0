from rest_framework import serializers
from .models import User, UserPrivilege, Notification, SchoolSettings, AuditLog
from .privileges import get_role_display_name


class UpperCaseRoleMixin:
    def to_internal_value(self, data):
        # Roles arrive in any case from the admin forms
        if hasattr(data, 'get') and isinstance(data.get('role'), str):
            data = data.copy()
            data['role'] = data['role'].upper()
        return super().to_internal_value(data)


class UserSerializer(UpperCaseRoleMixin, serializers.ModelSerializer):
    role_display = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email', 'phone', 'role', 'role_display', 'status', 'is_active',
                  'is_staff', 'first_time_login', 'last_login', 'account_locked', 'locked_until', 'lock_reason',
                  'password_attempts', 'student_ids', 'created_at', 'updated_at']
        read_only_fields = ['last_login', 'account_locked', 'locked_until', 'lock_reason', 'password_attempts',
                            'student_ids', 'created_at', 'updated_at']

    def get_role_display(self, obj):
        return get_role_display_name(obj.role)


class UserCreateSerializer(UpperCaseRoleMixin, serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    username = serializers.CharField(required=False)

    class Meta:
        model = User
        fields = ['username', 'name', 'email', 'password', 'role', 'phone']
        extra_kwargs = {
            'name': {'required': True, 'allow_blank': False},
            'role': {'required': True},
        }

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError('A user with that username already exists.')
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        if not validated_data.get('username'):
            validated_data['username'] = validated_data['email']
        user = User(**validated_data, is_active=True)
        user.set_password(password)
        user.save()
        return user


class UserPrivilegeSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserPrivilege
        fields = ['id', 'user', 'privilege', 'assigned_at', 'expires_at']
        read_only_fields = ['user', 'assigned_at']


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'user', 'title', 'message', 'type', 'read', 'date']
        read_only_fields = ['user', 'date']


class SchoolSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = SchoolSettings
        exclude = ['id']
        read_only_fields = ['updated_at']


class AcademicSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = SchoolSettings
        fields = ['current_year', 'current_term', 'term_start', 'term_end', 'next_term_begins',
                  'reporting_date', 'attendance_start', 'attendance_end', 'public_holidays']


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']
