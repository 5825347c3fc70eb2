import subprocess
import sys
import textwrap

from django.conf import settings

# Runs in a fresh interpreter so that the URLconf and the REST framework
# views are imported before anything else has loaded clinic.exceptions.
BOOT_SCRIPT = textwrap.dedent("""
    import os

    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hms.test_settings')

    import django

    django.setup()

    from django.test.utils import setup_test_environment

    setup_test_environment()

    from django.test import Client

    response = Client().get('/api/auth/me')
    print(response.status_code, response.json()['message'])
""")


def test_fresh_process_serves_api_requests():
    result = subprocess.run(
        [sys.executable, '-c', BOOT_SCRIPT],
        cwd=settings.BASE_DIR,
        capture_output=True,
        text=True,
        timeout=120,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip().splitlines()[-1] == '401 No token provided'


def test_authentication_imports_before_rest_framework_views():
    script = textwrap.dedent("""
        import os

        os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hms.test_settings')

        import django

        django.setup()

        import clinic.authentication
        import rest_framework.views
        import hms.urls

        print('ok')
    """)
    result = subprocess.run(
        [sys.executable, '-c', script],
        cwd=settings.BASE_DIR,
        capture_output=True,
        text=True,
        timeout=120,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip().splitlines()[-1] == 'ok'
