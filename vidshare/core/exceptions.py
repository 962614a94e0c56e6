from fastapi import status


class VidshareError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(VidshareError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "bad_request"


class UnauthorizedError(VidshareError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class NotFoundError(VidshareError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(VidshareError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ExternalServiceError(VidshareError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "external_service_error"
