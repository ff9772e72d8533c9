from pathlib import Path
import os
from urllib.parse import urlparse, parse_qs, unquote
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from this project reliably (do not depend on CWD).
load_dotenv(dotenv_path=BASE_DIR / '.env', override=False)


def _env_bool(name: str, default: str = 'False') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'y', 'on')


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-dev-key-12345')

DEBUG = _env_bool('DEBUG')

# When enabled, refuse to run in production with placeholder secrets.
SECURITY_STRICT = _env_bool('SECURITY_STRICT')

if DEBUG:
    ALLOWED_HOSTS = ['*']
else:
    _hosts = os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1').strip()
    ALLOWED_HOSTS = [h.strip() for h in _hosts.split(',') if h.strip()]

if SECURITY_STRICT and (not DEBUG) and SECRET_KEY == 'django-insecure-dev-key-12345':
    raise RuntimeError('DJANGO_SECRET_KEY must be set when SECURITY_STRICT is enabled')

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'rest_framework',
    'lease_templates',
]

MIDDLEWARE = []


def _parse_database_url(database_url: str) -> dict:
    """Parse a Postgres DATABASE_URL into Django DATABASES['default'] keys."""
    parsed = urlparse(database_url)
    scheme = (parsed.scheme or '').lower()
    if scheme not in ('postgres', 'postgresql'):
        raise ValueError('DATABASE_URL must start with postgresql://')

    name = (parsed.path or '').lstrip('/')
    if not name:
        name = 'postgres'

    qs = parse_qs(parsed.query or '')
    sslmode = (qs.get('sslmode', [None])[0] or os.getenv('DB_SSLMODE', 'prefer'))

    return {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': name,
        'USER': unquote(parsed.username or ''),
        'PASSWORD': unquote(parsed.password or ''),
        'HOST': parsed.hostname or '',
        'PORT': str(parsed.port or 5432),
        'CONN_MAX_AGE': int(os.getenv('DB_CONN_MAX_AGE', '60')),
        'CONN_HEALTH_CHECKS': True,
        'OPTIONS': {
            'sslmode': sslmode,
            'connect_timeout': int(os.getenv('DB_CONNECT_TIMEOUT', '20')),
        },
    }


# SQLite is the local default; a DATABASE_URL takes precedence.
DATABASE_URL = os.getenv('DATABASE_URL', '').strip()
if DATABASE_URL:
    DATABASES = {'default': _parse_database_url(DATABASE_URL)}
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': os.getenv('LEASE_DB_PATH', str(BASE_DIR / 'leases.sqlite3')),
        }
    }

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [],
    'UNAUTHENTICATED_USER': None,
}

# ---------------------------------------------------------------------------
# Lease template engine
# ---------------------------------------------------------------------------

LEASE_TEMPLATES = {
    # 'orm' persists through lease_templates.models, 'memory' keeps records in-process.
    'STORE': os.getenv('LEASE_TEMPLATES_STORE', 'orm').strip().lower(),
    'SEED_DEFAULT_CLAUSES': _env_bool('LEASE_TEMPLATES_SEED', 'True'),
}

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').strip().upper()

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
        'lease_templates': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'django.db.backends': {
            'handlers': ['console'],
            'level': os.getenv('DB_LOG_LEVEL', 'WARNING').strip().upper(),
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}
