"""Error types raised by the events API client.

Every error the client raises derives from APIError, so page controllers can
catch one type at the top of their async flows and map it to a message with
user_message().
"""

from typing import Optional


class APIError(Exception):
    """Base exception for events API client errors."""

    retryable = False

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(APIError):
    """Raised when the API cannot be reached."""
    retryable = True


class RequestTimeoutError(NetworkError):
    """Raised when the API does not answer within the client timeout."""
    pass


class ServerError(APIError):
    """Raised on a 5xx response."""
    retryable = True


class ClientError(APIError):
    """Raised on a 4xx response other than 404."""
    pass


class NotFoundError(ClientError):
    """Raised when the requested resource does not exist or is inactive."""
    pass


class ValidationError(APIError):
    """Raised for malformed input, before any request is made."""
    pass


class DataShapeError(APIError):
    """Raised when a non-empty response holds no usable records."""
    pass


# User-facing messages, keyed by context
CONNECTIVITY_MESSAGE = 'Unable to connect to the server. Please check your internet connection and try again.'
TIMEOUT_MESSAGE = 'The request is taking longer than expected. Please try again.'
GENERIC_MESSAGE = 'We encountered an unexpected error while loading events. Please try again later.'
NOT_FOUND_MESSAGES = {
    'events': 'The events data is currently unavailable. Please check back later.',
    'event': 'The event you are looking for does not exist or has been removed.',
}


def user_message(error: Exception, context: str = 'events') -> str:
    """
    Map an error to a human-readable message.

    Raw exception text is never shown except for ValidationError, whose
    message is written for users.
    """
    if isinstance(error, RequestTimeoutError):
        return TIMEOUT_MESSAGE
    if isinstance(error, NetworkError):
        return CONNECTIVITY_MESSAGE
    if isinstance(error, NotFoundError):
        return NOT_FOUND_MESSAGES.get(context, NOT_FOUND_MESSAGES['events'])
    if isinstance(error, ValidationError):
        return error.message
    return GENERIC_MESSAGE
