# bontemp/core/config.py

import os


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name: str, default: str) -> list:
    raw = os.getenv(name, default).strip()
    if raw == '*':
        return ['*']
    return [item.strip() for item in raw.split(',') if item.strip()]


class Config:
    """Settings shared by every environment. Values come from the environment (.env is loaded first)."""
    # Classifier (OpenAI-compatible API)
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_BASE_URL = os.getenv('OPENAI_BASE_URL')
    SAFETY_MODEL = os.getenv('SAFETY_MODEL', 'gpt-4o-mini')
    MODERATION_MODEL = os.getenv('MODERATION_MODEL', 'omni-moderation-latest')
    SAFETY_BLOCK_THRESHOLD = os.getenv('SAFETY_BLOCK_THRESHOLD', 'BLOCK_MEDIUM_AND_ABOVE')

    COMMENT_MAX_LENGTH = int(os.getenv('COMMENT_MAX_LENGTH', 500))

    # Daily winner schedule: crontab fields, evaluated in DAILY_WINNER_TIMEZONE
    DAILY_WINNER_CRON = os.getenv('DAILY_WINNER_CRON', '59 23 * * *')
    DAILY_WINNER_TIMEZONE = os.getenv('DAILY_WINNER_TIMEZONE', 'Europe/Rome')

    # Browser origins allowed to call the callable endpoints (comma separated, "*" for any)
    CORS_ORIGINS = _env_list('CORS_ORIGINS', 'https://bontempapp.soundscapestudio.org')

    # Background components are opt-in and never started for one-shot CLI commands.
    SCHEDULER_ENABLED = _env_flag('SCHEDULER_ENABLED')
    LIKES_WATCH_ENABLED = _env_flag('LIKES_WATCH_ENABLED')

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Local development against the development Firebase project."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """Test runs. Classifier credentials are not required here."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    SCHEDULER_ENABLED = False
    LIKES_WATCH_ENABLED = False


class ProductionConfig(Config):
    """Deployed service. Without a credentials path the application default credentials are used."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH')


# Selected in bontemp/__init__.py from FLASK_ENV
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
