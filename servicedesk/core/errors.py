"""
Error taxonomy shared by the storage layer, services and routers.

Services raise these; the application installs a single handler that turns
any ServiceError into ``{"success": false, "message": ...}`` with the
matching HTTP status.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for failures that are reported to the API caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class ConflictError(ServiceError):
    status_code = 409


class TooManyRequestsError(ServiceError):
    status_code = 429


class StorageUnavailableError(ServiceError):
    """A document exists but could not be read or written."""

    status_code = 503
