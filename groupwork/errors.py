"""Error kinds raised by the service layer.

Every error carries a stable ``kind`` alongside the HTTP status so that
callers can discriminate failures without parsing messages.
"""
from fastapi import HTTPException, status


class ServiceError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "error"

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"


class InvalidState(ServiceError):
    kind = "invalid_state"


class Expired(InvalidState):
    kind = "expired"


class InvalidInput(ServiceError):
    kind = "invalid_input"


class InvalidRole(InvalidInput):
    kind = "invalid_role"
