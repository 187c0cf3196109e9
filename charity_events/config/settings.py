"""Web client settings."""

import os

from .environment import IS_PRODUCTION_ENVIRONMENT


class Config:
    # Flask configuration
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev')
    DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Events API configuration
    API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:8000')
    API_TIMEOUT = float(os.getenv('API_TIMEOUT', '10'))
    API_MAX_RETRIES = int(os.getenv('API_MAX_RETRIES', '3'))
    API_RETRY_DELAY = float(os.getenv('API_RETRY_DELAY', '1.0'))

    # Optional httpx transport, only set by tests
    API_TRANSPORT = None

    ORGANIZATION_NAME = os.getenv('ORGANIZATION_NAME', 'CharityEvents')
    SESSION_COOKIE_SECURE = IS_PRODUCTION_ENVIRONMENT
