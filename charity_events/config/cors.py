"""CORS configuration for the events API."""

import os

from .environment import IS_PRODUCTION_ENVIRONMENT

# CORS Origins configuration
ALLOWED_ORIGINS = {
    False: ["*"],  # Development - allow all
    True: [        # Production - only the web client
        os.environ.get('CLIENT_URL', 'http://localhost:8080'),
    ]
}

# The API is read-only
ALLOWED_METHODS = [
    "GET",
    "OPTIONS"   # Required for CORS preflight
]

ALLOWED_HEADERS = [
    "Content-Type",
    "Accept",
]

CORS_CONFIG = {
    "allow_origins": ALLOWED_ORIGINS[IS_PRODUCTION_ENVIRONMENT],
    "allow_credentials": True,
    "allow_methods": ALLOWED_METHODS,
    "allow_headers": ALLOWED_HEADERS,
    "expose_headers": [],
    "max_age": 86400,
}
