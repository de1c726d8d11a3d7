import json
import os

from allowlist_api.util import csf_to_list, env_flag

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

SECRET_KEY = os.environ.get(
    'SECRET_KEY', 'allowlist-api-insecure-development-key')

DEBUG = env_flag(os.environ.get('DEBUG'), default=False)

ALLOWED_HOSTS = csf_to_list(os.environ.get('ALLOWED_HOSTS', '*'))

SERVER_NAME = os.environ.get('SERVER_NAME', 'allowlist-api')
ENVIRONMENT = os.environ.get('ENVIRONMENT', 'development')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'drf_yasg',
    'allowlist',
    'analytics',
    'heartbeat',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'allowlist_api.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'allowlist_api.wsgi.application'

# Database
DATABASE_ENGINE = os.environ.get(
    'DATABASE_ENGINE', 'django.db.backends.sqlite3')

if DATABASE_ENGINE.endswith('sqlite3'):
    DATABASES = {
        'default': {
            'ENGINE': DATABASE_ENGINE,
            'NAME': os.environ.get(
                'DATABASE_NAME', os.path.join(BASE_DIR, 'db.sqlite3')),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': DATABASE_ENGINE,
            'NAME': os.environ.get('DATABASE_NAME', 'allowlist'),
            'USER': os.environ.get('DATABASE_USER', ''),
            'PASSWORD': os.environ.get('DATABASE_PASSWORD', ''),
            'HOST': os.environ.get('DATABASE_HOST', 'localhost'),
            'PORT': os.environ.get('DATABASE_PORT', '5432'),
            'CONN_MAX_AGE': 60,
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = os.path.join(BASE_DIR, 'static')

# Allowlist
# role vocabulary is deployment data: a named preset or a JSON file
# mapping each role to {"label": ..., "message": ...}
ALLOWLIST_ROLE_PRESET = os.environ.get('ALLOWLIST_ROLE_PRESET', 'presale')
ALLOWLIST_ROLES_FILE = os.environ.get('ALLOWLIST_ROLES_FILE')
ALLOWLIST_ROLES = None

if ALLOWLIST_ROLES_FILE:
    with open(ALLOWLIST_ROLES_FILE, encoding='utf-8') as roles_file:
        ALLOWLIST_ROLES = json.load(roles_file)

ALLOWLIST_RECORD_STORE = os.environ.get(
    'ALLOWLIST_RECORD_STORE', 'allowlist.store.DjangoRecordStore')

ALLOWLIST_THROTTLE_RATE = os.environ.get('ALLOWLIST_THROTTLE_RATE', '10/min') or None

# REST
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_THROTTLE_CLASSES': [
        'allowlist_api.throttling.AllowlistRateThrottle',
    ],
    'EXCEPTION_HANDLER': 'allowlist_api.exception_handler.custom_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

SWAGGER_SETTINGS = {
    'DEFAULT_AUTO_SCHEMA_CLASS': 'allowlist_api.swagger_auto_schema.ErrorResponseAutoSchema',
    'USE_SESSION_AUTH': False,
    'SECURITY_DEFINITIONS': None,
}

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'allowlist_api': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
        },
        'allowlist': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
        },
        'analytics': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
        },
        'heartbeat': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
        },
    },
}
