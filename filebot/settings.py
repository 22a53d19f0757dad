"""
Django settings for the filebot project.

Every deployment-specific value comes from the environment (a local .env file
is loaded first when present).
"""
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def _env_list(name, default=''):
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-filebot-development-key')

DEBUG = os.getenv('DJANGO_DEBUG', 'False').lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = _env_list('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'apps.kvstore',
    'apps.files',
    'apps.chat_sessions',
    'apps.usage',
    'apps.messaging',
    'apps.bot',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
]

ROOT_URLCONF = 'filebot.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'filebot.wsgi.application'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('FILEBOT_DATABASE_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

# Bot configuration, turned into an immutable BotConfig once at startup
# (see apps.bot.apps.BotAppConfig.ready).
FILEBOT = {
    'BOT_TOKEN': os.getenv('TELEGRAM_BOT_TOKEN', ''),
    'BOT_USERNAME': os.getenv('TELEGRAM_BOT_USERNAME', 'FileStoreBot'),
    'ADMIN_IDS': _env_list('TELEGRAM_ADMIN_IDS'),
    'API_BASE': os.getenv('TELEGRAM_API_BASE', 'https://api.telegram.org'),
    'LINK_BASE': os.getenv('TELEGRAM_LINK_BASE', 'https://t.me'),
    'WEBHOOK_SECRET': os.getenv('TELEGRAM_WEBHOOK_SECRET', ''),
    'REQUEST_TIMEOUT': float(os.getenv('TELEGRAM_REQUEST_TIMEOUT', '30')),
    'PAGE_SIZE': int(os.getenv('FILEBOT_PAGE_SIZE', '5')),
    'CATEGORIES': _env_list('FILEBOT_CATEGORIES', 'general,documents,photos,videos,audio'),
}

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
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.getenv('FILEBOT_LOG_LEVEL', 'INFO'),
            'propagate': True,
        },
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
    },
}
