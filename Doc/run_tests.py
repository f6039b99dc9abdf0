#!/usr/bin/env python
"""
Test runner script for the school backend test suites
Usage: python Doc/run_tests.py [--coverage] [app ...] (after pip install -e .[test])
"""
import os
import sys
import django
from django.conf import settings
from django.test.utils import get_runner

APPS = [
    'backend.core',
    'backend.students',
    'backend.billing',
    'backend.staff',
    'backend.clinic',
    'backend.attendance',
    'backend.messaging',
    'backend.sponsorships',
    'backend.resources',
    'backend.inventory',
    'backend.reports',
]

if __name__ == "__main__":
    args = sys.argv[1:]
    measure = '--coverage' in args
    if measure:
        import coverage

        args.remove('--coverage')
        # Start before django.setup() so module-level code is measured
        cov = coverage.Coverage(source=['backend'], omit=['*/migrations/*', '*/tests.py'])
        cov.start()

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backend.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    labels = [f'backend.{name}' if not name.startswith('backend.') else name for name in args]
    failures = test_runner.run_tests(labels or APPS)

    if measure:
        cov.stop()
        cov.save()
        cov.report()
    sys.exit(bool(failures))
