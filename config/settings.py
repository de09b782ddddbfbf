"""
Configuration settings for NewsLens news ingestion and analytics.
"""

from decouple import config
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).parent.parent

# API Keys (set these in your .env file)
NEWS_API_KEY = config('NEWS_API_KEY', default='')

# Database settings
# PostgreSQL connection (preferred)
POSTGRES_HOST = config('POSTGRES_HOST', default='localhost')
POSTGRES_PORT = config('POSTGRES_PORT', default='5432')
POSTGRES_DB = config('POSTGRES_DB', default='newslens')
POSTGRES_USER = config('POSTGRES_USER', default='postgres')
POSTGRES_PASSWORD = config('POSTGRES_PASSWORD', default='')

# Construct database URL
if POSTGRES_PASSWORD:
    POSTGRES_URL = f'postgresql://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}'
else:
    POSTGRES_URL = f'postgresql://{POSTGRES_USER}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}'

# Primary database URL (PostgreSQL preferred, SQLite fallback)
DATABASE_URL = config('DATABASE_URL', default=POSTGRES_URL)

# SQLite fallback URL
SQLITE_URL = f'sqlite:///{BASE_DIR}/data/newslens.db'

# Database configuration
DATABASE_CONFIG = {
    'url': DATABASE_URL,
    'sqlite_fallback': SQLITE_URL,
    'pool_size': config('DB_POOL_SIZE', default=10, cast=int),
    'max_overflow': config('DB_MAX_OVERFLOW', default=20, cast=int),
    'pool_timeout': config('DB_POOL_TIMEOUT', default=30, cast=int),
    'pool_recycle': config('DB_POOL_RECYCLE', default=3600, cast=int),
    'echo': config('DB_ECHO', default=False, cast=bool),
}

# News API settings
NEWS_API_CONFIG = {
    'default_page_size': config('NEWS_API_PAGE_SIZE', default=20, cast=int),
    'max_page_size': 100,  # NewsAPI hard limit
    'language': config('NEWS_API_LANGUAGE', default=''),
}

# Pipeline settings
PIPELINE_CONFIG = {
    'trending_queries': config('TRENDING_QUERIES', default=3, cast=int),
    'default_window': config('DEFAULT_WINDOW', default='24h'),
}

# Logging settings
LOGGING_CONFIG = {
    'level': config('LOG_LEVEL', default='INFO'),
    'format': '{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}',
    'rotation': '10 MB',
    'retention': '30 days',
    'log_file': BASE_DIR / 'logs' / 'newslens.log',
}

# Data storage paths
DATA_PATHS = {
    'database': BASE_DIR / 'data',
    'exports': BASE_DIR / 'data' / 'exports',
}

# Create necessary directories
for path in DATA_PATHS.values():
    path.mkdir(parents=True, exist_ok=True)
