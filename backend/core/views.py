import logging
import re
import secrets
from datetime import timedelta
from urllib.parse import quote

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from .models import UserPrivilege, Notification, SchoolSettings, AuditLog
from .serializers import (
    UserSerializer, UserCreateSerializer, UserPrivilegeSerializer,
    NotificationSerializer, SchoolSettingsSerializer, AcademicSettingsSerializer,
    AuditLogSerializer
)
from .permissions import IsSchoolAdmin, is_school_admin
from .privileges import (
    assign_default_privileges, get_effective_privileges, get_role_display_name
)
from .cache_utils import get_cached_school_settings, cache_school_settings
from .utils import create_audit_log, notify_admins, notify_user, numeric_id

logger = logging.getLogger(__name__)

User = get_user_model()

SYMBOL_RE = re.compile(r'[!@#$%^&*()_+\-=\[\]{};\':"\\|,.<>/?~`]')


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['email'] = user.email
        token['role'] = user.role
        token['groups'] = list(user.groups.values_list('name', flat=True))
        return token


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Custom token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            # User referenced in token doesn't exist anymore
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    """Custom token refresh view that handles deleted users gracefully"""
    serializer_class = CustomTokenRefreshSerializer


def issue_tokens(user):
    token = CustomTokenObtainPairSerializer.get_token(user)
    return {'access': str(token.access_token), 'refresh': str(token)}


def is_super_admin(user):
    return (user.email or '').lower() == settings.SUPER_ADMIN_EMAIL


def super_admin_forbidden(action):
    return Response({
        'error': f'Cannot {action} the super admin account',
        'details': 'The super admin account is protected.'
    }, status=status.HTTP_403_FORBIDDEN)


def format_remaining(seconds):
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f'{minutes}m {secs}s'


# Auth views
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """User registration endpoint"""
    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        assign_default_privileges(user)
        return Response({
            'message': 'User registered successfully',
            'user': UserSerializer(user).data,
            **issue_tokens(user),
        }, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Email/password login with attempt counting and lockout"""
    email = (request.data.get('email') or '').strip()
    password = request.data.get('password') or ''
    if not email or not password:
        return Response({'error': 'Email and password are required'}, status=status.HTTP_400_BAD_REQUEST)

    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

    now = timezone.now()
    max_attempts = settings.LOGIN_MAX_ATTEMPTS
    window = timedelta(minutes=settings.LOGIN_LOCKOUT_MINUTES)

    if user.account_locked:
        return Response({
            'error': 'Access Denied',
            'message': 'Your account has been locked by an administrator. Please contact support.',
            'lockReason': user.lock_reason or 'Locked by administrator',
            'accountLocked': True,
        }, status=status.HTTP_423_LOCKED)

    if user.is_temporarily_locked:
        remaining = (user.locked_until - now).total_seconds()
        return Response({
            'error': 'Access Denied',
            'message': f'Your account is temporarily locked. Please wait {format_remaining(remaining)} before trying again.',
            'remainingTime': int(remaining),
            'lockedUntil': user.locked_until,
        }, status=status.HTTP_423_LOCKED)

    if user.password_attempts >= max_attempts:
        if user.last_password_attempt and now - user.last_password_attempt < window:
            remaining = (user.last_password_attempt + window - now).total_seconds()
            return Response({
                'error': 'Account temporarily locked',
                'message': f'Too many failed attempts. Please wait {int(remaining)} seconds before trying again.',
                'remainingTime': int(remaining),
            }, status=status.HTTP_423_LOCKED)
        # Lockout window has passed
        user.password_attempts = 0
        user.locked_until = None
        user.save(update_fields=['password_attempts', 'locked_until'])

    if not user.check_password(password):
        user.password_attempts += 1
        user.last_password_attempt = now
        if user.password_attempts >= max_attempts:
            user.locked_until = now + window
            notify_admins(
                'User account locked',
                f'User {user.name} ({user.email}) has been temporarily locked out due to too many failed login attempts.',
                type='WARNING'
            )
            create_audit_log(request=request, action='account_lock', model_name='User', object_id=user.id,
                             object_name=user.email, changes={'reason': 'password_attempts'})
        user.save(update_fields=['password_attempts', 'last_password_attempt', 'locked_until'])
        create_audit_log(request=request, action='login_failed', model_name='User', object_id=user.id,
                         object_name=user.email, changes={'attempts': user.password_attempts})
        attempts_remaining = max(0, max_attempts - user.password_attempts)
        return Response({
            'error': 'Invalid credentials',
            'attemptsRemaining': attempts_remaining,
            'message': (
                f'Too many failed attempts. Please wait {settings.LOGIN_LOCKOUT_MINUTES} minutes.'
                if attempts_remaining == 0 else 'Invalid credentials'
            ),
        }, status=status.HTTP_401_UNAUTHORIZED)

    if not user.is_active:
        return Response({'error': 'User account is disabled.'}, status=status.HTTP_401_UNAUTHORIZED)

    user.clear_lock()
    user.last_login = now
    user.save()
    create_audit_log(request=request, action='login', model_name='User', object_id=user.id,
                     object_name=user.email, user=user)

    if user.first_time_login:
        return Response({
            'requiresPasswordChange': True,
            'message': 'First time login detected. You must change your password.',
            'user': {'id': user.id, 'email': user.email, 'name': user.name, 'role': user.role},
        })

    return Response({
        'user': UserSerializer(user).data,
        'privileges': get_effective_privileges(user),
        **issue_tokens(user),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with privileges"""
    user = request.user
    user_data = UserSerializer(user).data
    user_data['groups'] = list(user.groups.values_list('name', flat=True))
    user_data['privileges'] = get_effective_privileges(user)
    user_data['role_display'] = get_role_display_name(user.role)
    user_data['is_admin'] = is_school_admin(user)
    return Response(user_data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def provide_temp_password(request):
    """Give a user a temporary password they must change at next login"""
    user_id = request.data.get('userId')
    temp_password = request.data.get('tempPassword')
    if not user_id or not temp_password:
        return Response({'error': 'User ID and temporary password are required'}, status=status.HTTP_400_BAD_REQUEST)
    user_pk = numeric_id(user_id)
    if user_pk is None:
        return Response({'error': 'Invalid user ID'}, status=status.HTTP_400_BAD_REQUEST)

    user = get_object_or_404(User, pk=user_pk)
    user.set_password(temp_password)
    user.first_time_login = True
    user.clear_lock()
    user.status = 'ACTIVE'
    user.save()

    notify_user(
        user, 'Temporary password provided',
        'An administrator has provided you with a temporary password. You will be required to change it on your next login.',
        type='PASSWORD_RESET'
    )
    create_audit_log(request=request, action='password_reset', model_name='User', object_id=user.id,
                     object_name=user.email, changes={'temporary': True})
    return Response({'message': 'Temporary password provided successfully', 'userId': user.id})


@api_view(['POST'])
@permission_classes([AllowAny])
def change_password(request):
    """Change a password, also used to finish a first-time login"""
    user_id = request.data.get('userId')
    if not user_id and request.user.is_authenticated:
        user_id = request.user.id
    old_password = request.data.get('oldPassword')
    new_password = request.data.get('newPassword')
    confirm_password = request.data.get('confirmPassword')

    if not user_id or not old_password or not new_password or not confirm_password:
        return Response({'error': 'All fields are required'}, status=status.HTTP_400_BAD_REQUEST)
    if new_password != confirm_password:
        return Response({'error': 'New passwords do not match'}, status=status.HTTP_400_BAD_REQUEST)
    if len(new_password) < 4:
        return Response({'error': 'Password must be at least 4 characters long'}, status=status.HTTP_400_BAD_REQUEST)
    if not SYMBOL_RE.search(new_password):
        return Response(
            {'error': 'Password must contain at least one symbol (!@#$%^&*()_+-=[]{}|;:,.<>?)'},
            status=status.HTTP_400_BAD_REQUEST
        )

    user_pk = numeric_id(user_id)
    if user_pk is None:
        return Response({'error': 'Invalid user ID'}, status=status.HTTP_400_BAD_REQUEST)
    user = User.objects.filter(pk=user_pk).first()
    if user is None:
        return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)
    if not user.check_password(old_password):
        return Response({'error': 'Current password is incorrect'}, status=status.HTTP_401_UNAUTHORIZED)

    user.set_password(new_password)
    user.first_time_login = False
    user.save()
    return Response({'message': 'Password changed successfully', **issue_tokens(user)})


def find_user_by_reset_token(email, token):
    return User.objects.filter(
        email__iexact=email,
        reset_token=token,
        reset_token_expiry__gt=timezone.now()
    ).first()


@api_view(['POST'])
@permission_classes([AllowAny])
def verify_reset_token(request):
    """Check a password reset token"""
    token = request.data.get('token')
    email = request.data.get('email')
    if not token or not email:
        return Response({'error': 'Token and email are required'}, status=status.HTTP_400_BAD_REQUEST)

    user = find_user_by_reset_token(email, token)
    if user is None:
        return Response({'error': 'Invalid or expired reset token'}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'message': 'Token is valid', 'user': {'id': user.id, 'email': user.email, 'name': user.name}})


@api_view(['POST'])
@permission_classes([AllowAny])
def reset_password(request):
    """Set a new password from a reset link"""
    token = request.data.get('token')
    email = request.data.get('email')
    new_password = request.data.get('newPassword')
    confirm_password = request.data.get('confirmPassword')

    if not token or not email or not new_password or not confirm_password:
        return Response({'error': 'All fields are required'}, status=status.HTTP_400_BAD_REQUEST)
    if new_password != confirm_password:
        return Response({'error': 'Passwords do not match'}, status=status.HTTP_400_BAD_REQUEST)
    if len(new_password) < 6:
        return Response({'error': 'Password must be at least 6 characters long'}, status=status.HTTP_400_BAD_REQUEST)

    user = find_user_by_reset_token(email, token)
    if user is None:
        return Response({'error': 'Invalid or expired reset token'}, status=status.HTTP_400_BAD_REQUEST)

    user.set_password(new_password)
    user.reset_token = None
    user.reset_token_expiry = None
    user.first_time_login = False
    user.status = 'ACTIVE'
    user.clear_lock()
    user.save()
    create_audit_log(request=request, action='password_reset', model_name='User', object_id=user.id,
                     object_name=user.email, user=user, changes={'via': 'reset_link'})
    return Response({'message': 'Password reset successfully'})


@api_view(['POST'])
@permission_classes([AllowAny])
def forgot_password(request):
    """Ask the administrators for a password reset"""
    email = request.data.get('email')
    if not email:
        return Response({'error': 'Email is required'}, status=status.HTTP_400_BAD_REQUEST)

    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        return Response({'error': 'User not found with this email address'}, status=status.HTTP_404_NOT_FOUND)

    notify_admins(
        'Password reset request',
        f'User {user.name} ({user.email}) has requested a password reset. Please review and take action.',
        type='PASSWORD_RESET'
    )
    return Response({'message': 'Password reset request sent successfully. An administrator will be notified.'})


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.all().order_by('name')
        role = request.query_params.get('role')
        if role:
            users = users.filter(role=role.upper())
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)
    else:
        serializer = UserCreateSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            assign_default_privileges(user)
            create_audit_log(request=request, action='create', model_name='User', object_id=user.id,
                             object_name=user.email, changes={'role': user.role})
            return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        data = UserSerializer(user).data
        data['privileges'] = get_effective_privileges(user)
        return Response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if is_super_admin(user):
            return super_admin_forbidden('delete')
        create_audit_log(request=request, action='delete', model_name='User', object_id=user.id,
                         object_name=user.email)
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_reset_password(request, pk):
    """Set a user's password and force a change at next login"""
    user = get_object_or_404(User, pk=pk)
    new_password = request.data.get('newPassword') or request.data.get('password')
    if not new_password:
        return Response({'error': 'New password is required'}, status=status.HTTP_400_BAD_REQUEST)

    user.set_password(new_password)
    user.first_time_login = True
    user.status = 'ACTIVE'
    user.clear_lock()
    user.save()
    create_audit_log(request=request, action='password_reset', model_name='User', object_id=user.id,
                     object_name=user.email)
    return Response({'message': 'Password reset successfully', 'user': UserSerializer(user).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_lock(request, pk):
    """Lock a user temporarily (lockUntil) or until unlocked"""
    user = get_object_or_404(User, pk=pk)
    reason = request.data.get('reason') or 'Locked by administrator'
    lock_until = request.data.get('lockUntil')

    if lock_until:
        locked_until = parse_datetime(str(lock_until))
        if locked_until is None:
            return Response({'error': 'Invalid lockUntil date'}, status=status.HTTP_400_BAD_REQUEST)
        if timezone.is_naive(locked_until):
            locked_until = timezone.make_aware(locked_until)
        user.locked_until = locked_until
        lock_type = 'temporary'
    else:
        user.account_locked = True
        lock_type = 'permanent'
    user.lock_reason = reason
    user.status = 'INACTIVE'
    user.save()

    notify_admins('User account locked', f'User {user.name} ({user.email}) was locked: {reason}', type='WARNING')
    create_audit_log(request=request, action='account_lock', model_name='User', object_id=user.id,
                     object_name=user.email, changes={'lockType': lock_type, 'reason': reason})
    return Response({
        'success': True,
        'lockType': lock_type,
        'message': f'User {user.name or user.email} has been locked',
        'user': UserSerializer(user).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_unlock(request, pk):
    """
    Unlock a user.

    An administrator lock is lifted directly. A lock caused by failed
    password attempts needs a new password, which the user must change
    at next login.
    """
    user = get_object_or_404(User, pk=pk)
    max_attempts = settings.LOGIN_MAX_ATTEMPTS
    password_locked = user.password_attempts >= max_attempts
    admin_locked = user.account_locked or (user.is_temporarily_locked and not password_locked)

    if admin_locked:
        lock_type = 'admin'
    elif password_locked or user.is_temporarily_locked:
        lock_type = 'password_attempts'
        new_password = request.data.get('newPassword')
        if not new_password:
            return Response({
                'error': 'A new password is required to unlock an account locked by failed login attempts',
                'lockType': lock_type,
                'requiresNewPassword': True,
            }, status=status.HTTP_400_BAD_REQUEST)
        user.set_password(new_password)
        user.first_time_login = True
    else:
        return Response({'success': False, 'lockType': 'none', 'message': 'User is not locked'})

    user.clear_lock()
    user.status = 'ACTIVE'
    user.save()
    create_audit_log(request=request, action='account_unlock', model_name='User', object_id=user.id,
                     object_name=user.email, changes={'lockType': lock_type})
    return Response({
        'success': True,
        'lockType': lock_type,
        'message': f'User {user.name or user.email} has been unlocked',
        'user': UserSerializer(user).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def generate_reset_link(request, pk):
    """Create a one-off password reset link for a user"""
    user = get_object_or_404(User, pk=pk)
    user.reset_token = secrets.token_urlsafe(32)
    user.reset_token_expiry = timezone.now() + timedelta(hours=settings.RESET_TOKEN_HOURS)
    user.save(update_fields=['reset_token', 'reset_token_expiry'])

    reset_link = f"{settings.FRONTEND_URL}/reset-password?token={user.reset_token}&email={quote(user.email)}"
    return Response({
        'resetLink': reset_link,
        'token': user.reset_token,
        'expiresAt': user.reset_token_expiry,
    })


# Privilege views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_privileges(request, pk):
    """List or add explicit privileges for a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        explicit = UserPrivilegeSerializer(user.privileges.all(), many=True).data
        return Response({'privileges': explicit, 'effective': get_effective_privileges(user)})

    if is_super_admin(user):
        return super_admin_forbidden('change privileges of')
    privilege = request.data.get('privilege')
    if not privilege:
        return Response({'error': 'Privilege is required'}, status=status.HTTP_400_BAD_REQUEST)
    if UserPrivilege.objects.filter(user=user, privilege=privilege).exists():
        return Response({'error': 'User already has this privilege'}, status=status.HTTP_400_BAD_REQUEST)

    expires_at = request.data.get('expiresAt')
    row = UserPrivilege.objects.create(
        user=user,
        privilege=privilege,
        expires_at=parse_datetime(str(expires_at)) if expires_at else None
    )
    create_audit_log(request=request, action='privilege_change', model_name='User', object_id=user.id,
                     object_name=user.email, changes={'added': privilege})
    return Response(UserPrivilegeSerializer(row).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_privilege_remove(request, pk, privilege):
    """Remove one explicit privilege"""
    user = get_object_or_404(User, pk=pk)
    if is_super_admin(user):
        return super_admin_forbidden('change privileges of')
    row = get_object_or_404(UserPrivilege, user=user, privilege=privilege)
    row.delete()
    create_audit_log(request=request, action='privilege_change', model_name='User', object_id=user.id,
                     object_name=user.email, changes={'removed': privilege})
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def user_reset_privileges(request, pk):
    """Replace a user's explicit privileges with the given list"""
    user = get_object_or_404(User, pk=pk)
    if is_super_admin(user):
        return super_admin_forbidden('change privileges of')
    privileges = request.data.get('privileges')
    if not isinstance(privileges, list):
        return Response({'error': 'Privileges must be a list'}, status=status.HTTP_400_BAD_REQUEST)

    UserPrivilege.objects.filter(user=user).delete()
    UserPrivilege.objects.bulk_create([
        UserPrivilege(user=user, privilege=privilege) for privilege in dict.fromkeys(privileges)
    ])
    create_audit_log(request=request, action='privilege_change', model_name='User', object_id=user.id,
                     object_name=user.email, changes={'reset': privileges})
    return Response({'message': 'Privileges updated', 'privileges': get_effective_privileges(user)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def assign_default_privileges_all(request):
    """Reassign role default privileges to every user"""
    updated = 0
    for user in User.objects.all():
        assign_default_privileges(user)
        updated += 1
    logger.info(f"Assigned default privileges to {updated} users")
    return Response({'message': 'Default privileges assigned', 'updatedUsers': updated})


# Parent / student assignment
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def assign_students(request, pk):
    """Set the students a parent can see"""
    from backend.students.models import Student

    user = get_object_or_404(User, pk=pk)
    if user.role != 'PARENT':
        return Response({'error': 'Students can only be assigned to parents'}, status=status.HTTP_400_BAD_REQUEST)

    student_ids = request.data.get('studentIds')
    if not isinstance(student_ids, list):
        return Response({'error': 'studentIds must be a list'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        student_ids = list(dict.fromkeys(int(sid) for sid in student_ids))
    except (TypeError, ValueError):
        return Response({'error': 'Student ids must be numeric'}, status=status.HTTP_400_BAD_REQUEST)

    found = set(Student.objects.filter(id__in=student_ids).values_list('id', flat=True))
    missing = [sid for sid in student_ids if sid not in found]
    if missing:
        return Response({'error': 'Some students were not found', 'missing': missing},
                        status=status.HTTP_400_BAD_REQUEST)

    user.student_ids = student_ids
    user.save(update_fields=['student_ids'])
    return Response({'message': 'Students assigned', 'studentIds': student_ids})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def assigned_students(request, pk):
    """Students assigned to a parent"""
    from backend.students.models import Student
    from backend.students.serializers import StudentSerializer

    user = get_object_or_404(User, pk=pk)
    if request.user.pk != user.pk and not is_school_admin(request.user):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    students = Student.objects.filter(id__in=user.student_ids or [])
    return Response(StudentSerializer(students, many=True).data)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def unassign_student(request, pk, student_id):
    """Remove one student from a parent"""
    user = get_object_or_404(User, pk=pk)
    current = list(user.student_ids or [])
    if student_id not in current:
        return Response({'error': 'Student is not assigned to this user'}, status=status.HTTP_404_NOT_FOUND)
    current.remove(student_id)
    user.student_ids = current
    user.save(update_fields=['student_ids'])
    return Response({'message': 'Student unassigned', 'studentIds': current})


# Notification views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_list(request, user_id):
    """Notifications for a user, newest first"""
    if request.user.pk != user_id and not is_school_admin(request.user):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    notifications = Notification.objects.filter(user_id=user_id)
    return Response(NotificationSerializer(notifications, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_unread_count(request, user_id):
    if request.user.pk != user_id and not is_school_admin(request.user):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    count = Notification.objects.filter(user_id=user_id, read=False).count()
    return Response({'count': count})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, pk):
    notification = get_object_or_404(Notification, pk=pk)
    if notification.user_id != request.user.pk and not is_school_admin(request.user):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    notification.read = True
    notification.save(update_fields=['read'])
    return Response(NotificationSerializer(notification).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def password_reset_request(request):
    """Forward a password reset request to every administrator"""
    email = request.data.get('email')
    if not email:
        return Response({'error': 'Email is required'}, status=status.HTTP_400_BAD_REQUEST)
    name = request.data.get('name') or email
    notified = notify_admins(
        'Password reset request',
        f'{name} ({email}) has requested a password reset.',
        type='PASSWORD_RESET'
    )
    return Response({'message': 'Administrators notified', 'notifiedAdmins': notified})


# Settings views
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def school_settings(request):
    """Get or update the school settings"""
    if request.method == 'GET':
        data = get_cached_school_settings()
        if data is None:
            data = SchoolSettingsSerializer(SchoolSettings.load()).data
            cache_school_settings(data)
        return Response(data)

    if not is_school_admin(request.user):
        return Response({'error': 'Administrator access required'}, status=status.HTTP_403_FORBIDDEN)
    serializer = SchoolSettingsSerializer(SchoolSettings.load(), data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        create_audit_log(request=request, action='update', model_name='SchoolSettings',
                         object_id=SchoolSettings.SINGLETON_ID, changes=dict(request.data))
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def academic_settings(request):
    """Update the academic calendar"""
    instance = SchoolSettings.load()
    serializer = AcademicSettingsSerializer(instance, data=request.data, partial=True)
    if serializer.is_valid():
        serializer.save()
        return Response(SchoolSettingsSerializer(instance).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSchoolAdmin])
def security_settings(request):
    """Replace the security settings blob"""
    payload = request.data.get('securitySettings', request.data)
    if not isinstance(payload, dict):
        return Response({'error': 'Security settings must be an object'}, status=status.HTTP_400_BAD_REQUEST)
    instance = SchoolSettings.load()
    instance.security_settings = dict(payload)
    instance.save()
    return Response({'message': 'Security settings saved', 'securitySettings': instance.security_settings})


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List all audit logs with filtering"""
    queryset = AuditLog.objects.select_related('user')

    # Non-admins only see their own entries
    if not is_school_admin(request.user):
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    queryset = queryset.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not is_school_admin(request.user) and audit_log.user != request.user:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def global_search(request):
    """Global search across students, staff, users and inventory"""
    query = request.query_params.get('q', '').strip()

    if not query:
        return Response({'students': [], 'staff': [], 'users': [], 'inventory': []})

    from backend.students.filters import StudentFilter, students_visible_to
    from backend.students.serializers import StudentListSerializer
    from backend.staff.models import Staff
    from backend.staff.serializers import StaffSerializer
    from backend.inventory.models import InventoryItem
    from backend.inventory.serializers import InventoryItemSerializer

    results = {}

    students_filter = StudentFilter({'search': query}, queryset=students_visible_to(request.user))
    results['students'] = StudentListSerializer(students_filter.qs[:20], many=True).data

    staff = Staff.objects.filter(
        Q(name__icontains=query) |
        Q(email__icontains=query) |
        Q(phone__icontains=query) |
        Q(role__icontains=query)
    )[:20]
    results['staff'] = StaffSerializer(staff, many=True).data

    if is_school_admin(request.user):
        users = User.objects.filter(
            Q(name__icontains=query) |
            Q(email__icontains=query) |
            Q(username__icontains=query)
        )[:20]
        results['users'] = UserSerializer(users, many=True).data
    else:
        results['users'] = []

    inventory = InventoryItem.objects.filter(
        Q(name__icontains=query) |
        Q(category__icontains=query) |
        Q(location__icontains=query)
    )[:20]
    results['inventory'] = InventoryItemSerializer(inventory, many=True).data

    return Response(results)
