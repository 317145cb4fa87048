from typing import Dict, List, Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ServiceError):
    """Malformed or missing input. Carries optional field-level messages."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)
        self.errors = errors or []


class AuthError(ServiceError):
    def __init__(self, message: str = "Not authorized to access this route") -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class NotFoundError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class InternalError(ServiceError):
    """Unexpected store/runtime failure. The message is logged, never sent to the client."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
