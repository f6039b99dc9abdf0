"""
Management command to reassign role default privileges
Usage: python manage.py assign_default_privileges [--role TEACHER]
"""
from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from backend.core.privileges import assign_default_privileges

User = get_user_model()


class Command(BaseCommand):
    help = 'Replace every user\'s privileges with the defaults for their role'

    def add_arguments(self, parser):
        parser.add_argument('--role', type=str, help='Only update users with this role')

    def handle(self, *args, **options):
        users = User.objects.all().order_by('id')
        if options.get('role'):
            users = users.filter(role=options['role'].upper())

        updated = 0
        for user in users:
            count = assign_default_privileges(user)
            self.stdout.write(f'  {user.email} ({user.role}): {count} privileges')
            updated += 1

        self.stdout.write(self.style.SUCCESS(f'\nCompleted: default privileges assigned to {updated} users'))
