"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.core.models import SchoolSettings
from backend.students.models import Student
from backend.billing.models import BillingType, FinancialRecord
from backend.staff.models import Staff
from backend.clinic.models import ClinicRecord
from backend.attendance.models import Attendance
from backend.messaging.models import Message
from backend.sponsorships.models import Sponsorship
from backend.inventory.models import InventoryItem
from backend.reports.models import WeeklyReport
from decimal import Decimal
from django.utils import timezone
import base64
import io
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='ADMIN', name=None,
                    is_staff=False, is_superuser=False, **extra):
        """Create a test user (an administrator unless another role is given)"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            name=name or username,
            is_staff=is_staff,
            is_superuser=is_superuser,
            **extra
        )
        return user

    @staticmethod
    def create_settings(term='Term 1', year='2025', **extra):
        """Save the school settings row with a known term and year"""
        settings = SchoolSettings.load()
        settings.current_term = term
        settings.current_year = year
        for key, value in extra.items():
            setattr(settings, key, value)
        settings.save()
        return settings

    @staticmethod
    def create_student(name=None, class_name='Senior 1', stream='A', access_number=None, age=12, **extra):
        """Create a test student"""
        if not name:
            name = f'Student {TestDataFactory.random_string(6)}'
        if access_number is None:
            access_number = f'AA{random.randint(1000, 9999)}'
        return Student.objects.create(
            name=name,
            class_name=class_name,
            stream=stream,
            access_number=access_number,
            age=age,
            **extra
        )

    @staticmethod
    def create_billing_type(class_name='Senior 1', name='Tuition', amount=None, term='Term 1', year='2025', **extra):
        """Create a test billing type"""
        return BillingType.objects.create(
            class_name=class_name,
            name=name,
            amount=amount if amount is not None else Decimal('100000.00'),
            term=term,
            year=year,
            **extra
        )

    @staticmethod
    def create_financial_record(student_id='1', type='payment', amount=None, term='Term 1', year='2025', **extra):
        """Create a test financial record"""
        return FinancialRecord.objects.create(
            student_id=str(student_id),
            type=type,
            amount=amount if amount is not None else Decimal('50000.00'),
            date=extra.pop('date', timezone.now()),
            status=extra.pop('status', 'paid'),
            term=term,
            year=year,
            **extra
        )

    @staticmethod
    def create_staff(name=None, role='Teacher', **extra):
        """Create a test staff member"""
        if not name:
            name = f'Staff {TestDataFactory.random_string(6)}'
        return Staff.objects.create(name=name, role=role, **extra)

    @staticmethod
    def create_clinic_record(student_id='1', student_name='Test Student', visit_date=None, **extra):
        """Create a test clinic visit"""
        return ClinicRecord.objects.create(
            student_id=str(student_id),
            student_name=student_name,
            visit_date=visit_date or timezone.now(),
            nurse_id=extra.pop('nurse_id', '1'),
            nurse_name=extra.pop('nurse_name', 'Nurse Test'),
            **extra
        )

    @staticmethod
    def create_attendance(student_id='1', date=None, status='present', **extra):
        """Create a test attendance row"""
        return Attendance.objects.create(
            student_id=str(student_id),
            date=date or timezone.localdate(),
            status=status,
            teacher_id=extra.pop('teacher_id', '1'),
            teacher_name=extra.pop('teacher_name', 'Teacher Test'),
            **extra
        )

    @staticmethod
    def create_message(sender, receiver=None, title='Hello', content='Test message', **extra):
        """Create a test message"""
        return Message.objects.create(sender=sender, receiver=receiver, title=title, content=content, **extra)

    @staticmethod
    def create_sponsorship(student=None, sponsor_name='Test Sponsor', amount=None, status='pending', **extra):
        """Create a test sponsorship"""
        if not student:
            student = TestDataFactory.create_student()
        return Sponsorship.objects.create(
            student=student,
            sponsor_name=sponsor_name,
            amount=amount if amount is not None else Decimal('30000.00'),
            status=status,
            **extra
        )

    @staticmethod
    def create_inventory_item(name=None, quantity=10, **extra):
        """Create a test inventory item"""
        if not name:
            name = f'Item {TestDataFactory.random_string(6)}'
        return InventoryItem.objects.create(name=name, quantity=quantity, **extra)

    @staticmethod
    def create_weekly_report(user_id='1', user_name='Teacher Test', content='Weekly progress', **extra):
        """Create a test weekly report"""
        return WeeklyReport.objects.create(user_id=str(user_id), user_name=user_name, content=content, **extra)

    @staticmethod
    def png_data_uri(size=(4, 4)):
        """A small valid PNG as a base64 data URI"""
        from PIL import Image
        buffer = io.BytesIO()
        Image.new('RGB', size, color=(200, 30, 30)).save(buffer, format='PNG')
        return 'data:image/png;base64,' + base64.b64encode(buffer.getvalue()).decode()

    @staticmethod
    def text_data_uri(text='hello world', mime_type='text/plain'):
        return f'data:{mime_type};base64,' + base64.b64encode(text.encode()).decode()


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
