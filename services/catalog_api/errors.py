"""
Domain errors raised by services and converted to JSON by the API
"""
from fastapi import status


class CatalogError(Exception):
    """Base error carrying the HTTP status it maps to"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(CatalogError):
    """Invalid, duplicate or missing input"""
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(CatalogError):
    """Missing or invalid token, or bad credentials"""
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(CatalogError):
    """Authenticated but lacking the required role"""
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(CatalogError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
