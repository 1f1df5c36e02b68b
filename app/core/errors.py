"""Domain errors raised by the board service.

Each error carries the HTTP status it maps to; the handlers registered in
``app.main`` render them as ``{"message": ...}``.
"""

from fastapi import status


class BoardError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(BoardError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AccessDenied(BoardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(BoardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(BoardError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"
