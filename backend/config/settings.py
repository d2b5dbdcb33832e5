"""
Django settings for the kinship marker database.

Everything deployment-specific comes from the environment.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name: str, default: bool = False) -> bool:
    return os.environ.get(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name: str, default: str) -> list:
    return [item.strip() for item in os.environ.get(name, default).split(',') if item.strip()]


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-kinship-dev-key')
DEBUG = env_bool('DJANGO_DEBUG', False)
ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1')

INSTALLED_APPS = [
    'django.contrib.staticfiles',
    'ninja',
    'kinship',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'config.urls'
WSGI_APPLICATION = 'config.wsgi.application'

# Cases live in Google Sheets; no relational database is used
DATABASES = {}

STATIC_URL = 'static/'
DATA_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024
FILE_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024

USE_TZ = True
TIME_ZONE = os.environ.get('DJANGO_TIME_ZONE', 'Asia/Ho_Chi_Minh')

# ============================================================
# GOOGLE SHEETS
# ============================================================

GOOGLE_SHEETS_CREDENTIALS = os.environ.get('GOOGLE_SHEETS_CREDENTIALS', '')
GOOGLE_SHEETS_CREDENTIALS_FILE = os.environ.get(
    'GOOGLE_SHEETS_CREDENTIALS_FILE',
    str(BASE_DIR / 'credentials' / 'credentials.json'),
)
KINSHIP_SPREADSHEET_ID = os.environ.get('KINSHIP_SPREADSHEET_ID', '')

# ============================================================
# CASE STORAGE & COMPARISON
# ============================================================

KINSHIP_IGNORED_TABLES = env_list('KINSHIP_IGNORED_TABLES', 'Sheet1')
KINSHIP_TABLE_RANGE = os.environ.get('KINSHIP_TABLE_RANGE', 'A:Z')
KINSHIP_SPACER_COLUMNS = env_bool('KINSHIP_SPACER_COLUMNS', False)
KINSHIP_MISMATCH_TOLERANCE = int(os.environ.get('KINSHIP_MISMATCH_TOLERANCE', '1'))
KINSHIP_UPLOAD_THROTTLE_SECONDS = float(os.environ.get('KINSHIP_UPLOAD_THROTTLE_SECONDS', '1.0'))
KINSHIP_STORE_RETRY_ATTEMPTS = int(os.environ.get('KINSHIP_STORE_RETRY_ATTEMPTS', '3'))
KINSHIP_STORE_RETRY_WAIT = float(os.environ.get('KINSHIP_STORE_RETRY_WAIT', '1.0'))

# ============================================================
# CELERY
# ============================================================

CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.environ.get('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_ALWAYS_EAGER = env_bool('CELERY_TASK_ALWAYS_EAGER', False)

# ============================================================
# LOGGING
# ============================================================

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'kinship': {
            'level': LOG_LEVEL,
        },
    },
}
