class ClinicError(Exception):
    """Base class for failures surfaced by the scheduling and access core.

    Each subclass carries a stable ``kind`` that the web layer maps to an
    HTTP status. The message is safe to return to the caller.
    """

    kind = "internal"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class NotFoundError(ClinicError):
    kind = "not_found"


class InvalidArgumentError(ClinicError):
    kind = "invalid_argument"


class ConflictError(ClinicError):
    kind = "conflict"


class InvalidStateError(ClinicError):
    kind = "invalid_state"


class MalformedTokenError(ClinicError):
    kind = "malformed"


class ExpiredTokenError(ClinicError):
    kind = "expired"


class ForbiddenError(ClinicError):
    kind = "forbidden"


class AuthenticationError(ClinicError):
    kind = "unauthenticated"


TOKEN_ERRORS = {
    MalformedTokenError.kind: MalformedTokenError,
    ExpiredTokenError.kind: ExpiredTokenError,
    ForbiddenError.kind: ForbiddenError,
}
