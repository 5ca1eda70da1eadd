# apps/core/exceptions.py

"""
Domain exceptions for Groove Board

Each exception carries the HTTP status the api_view decorator answers with.
django.core.exceptions.PermissionDenied is used as-is for 403.
"""


class GrooveError(Exception):
    """Base for every domain error"""

    status_code = 400
    default_message = 'Invalid request'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFound(GrooveError):
    status_code = 404
    default_message = 'This no longer exists, please refresh'


class Conflict(GrooveError):
    status_code = 409
    default_message = 'Conflict with the current state'


class InvalidInput(GrooveError):
    status_code = 400
    default_message = 'Invalid input'
