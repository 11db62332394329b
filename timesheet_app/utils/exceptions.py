"""
Application Exceptions
Domain errors raised by services and mapped to HTTP responses in main
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that carry an HTTP status"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class ApprovalAuthorizationError(PermissionDeniedError):
    """Acting user's role does not match the level the timesheet is waiting on"""


class InvalidTransitionError(AppError):
    """Timesheet status does not allow the requested action"""
    status_code = status.HTTP_409_CONFLICT


class TimesheetValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class RegistrationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(Exception):
    """Required configuration is missing"""


class ImmutableRecordError(Exception):
    """Attempt to modify or delete an append-only record"""
