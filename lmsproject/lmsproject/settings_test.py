"""Settings used by the test suite: in-memory SQLite, fast hashing, temporary uploads."""
import os
import tempfile

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('TOGETHER_API_KEYS', 'test-key-a,test-key-b')

from .settings import *  # noqa: E402,F401,F403

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
MEDIA_ROOT = tempfile.mkdtemp(prefix='lms-uploads-')
SESSION_COOKIE_SECURE = False
LOGGING['root']['level'] = 'WARNING'  # noqa: F405
