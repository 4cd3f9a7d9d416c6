# app/core/errors.py
"""
Domain errors raised by services.

Every error is an HTTPException so FastAPI maps it to the right status;
the handlers in app.main render it as {"error": <detail>, "code": <code>}.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
        )


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_detail = "Missing required fields"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "Unauthorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_detail = "Conflict"


class JoinCodeAlreadyUsed(Conflict):
    code = "already_used"
    default_detail = "This join code has already been used"


class JoinCodeExpired(Conflict):
    code = "expired"
    default_detail = "This join code has expired"


class AlreadyMember(Conflict):
    code = "already_member"
    default_detail = "You are already a member of this community"


class AlreadyInCommunity(Conflict):
    code = "already_in_community"
    default_detail = "You already belong to a community"
