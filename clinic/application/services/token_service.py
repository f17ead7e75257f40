from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Collection, Optional, Union
import logging

import jwt

from ..errors import TOKEN_ERRORS, ExpiredTokenError, ForbiddenError, MalformedTokenError
from ..principal import Principal, ROLES

logger = logging.getLogger(__name__)

# Messages returned to callers; they only name the kind of failure.
PUBLIC_MESSAGES = {
    MalformedTokenError.kind: "Invalid token",
    ExpiredTokenError.kind: "Token has expired",
    ForbiddenError.kind: "Not allowed for this role",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ValidationOutcome:
    valid: bool
    principal: Optional[Principal] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, principal: Principal) -> "ValidationOutcome":
        return cls(valid=True, principal=principal)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationOutcome":
        return cls(valid=False, reason=reason)

    @property
    def subject_id(self) -> Optional[str]:
        return self.principal.subject_id if self.principal else None

    def unwrap(self) -> Principal:
        """Return the principal or raise the typed error for the failure kind."""
        if self.valid:
            return self.principal
        raise TOKEN_ERRORS[self.reason](PUBLIC_MESSAGES[self.reason])


@dataclass
class TokenService:
    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int = 60
    clock: Callable[[], datetime] = _utcnow

    def issue(self, subject_id: object, role: str, expires_minutes: Optional[int] = None) -> str:
        if role not in ROLES:
            raise ValueError(f"Unknown role '{role}'")
        minutes = self.expire_minutes if expires_minutes is None else expires_minutes
        expire = self.clock() + timedelta(minutes=minutes)
        payload = {"sub": str(subject_id), "role": role, "exp": int(expire.timestamp())}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def validate(self, token: Optional[str], required_role: Union[str, Collection[str]]) -> ValidationOutcome:
        """Decode ``token`` and check it against the required role(s).

        Checks run in order: signature and shape (malformed), expiry
        (expired), role (forbidden). The reason for a rejection is logged
        here and only its kind is handed back.
        """
        if not token:
            logger.warning("Token validation failed: no token supplied")
            return ValidationOutcome.invalid(MalformedTokenError.kind)
        try:
            # expiry is checked below against our clock so `now >= exp` rejects
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False, "require": ["sub", "role", "exp"]},
            )
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token validation failed: {e}")
            return ValidationOutcome.invalid(MalformedTokenError.kind)

        subject_id, role, exp = payload.get("sub"), payload.get("role"), payload.get("exp")
        if not subject_id or role not in ROLES or not isinstance(exp, (int, float)):
            logger.warning("Token validation failed: unexpected claims")
            return ValidationOutcome.invalid(MalformedTokenError.kind)

        if self.clock().timestamp() >= exp:
            logger.info(f"Token validation failed: token for subject {subject_id} expired")
            return ValidationOutcome.invalid(ExpiredTokenError.kind)

        accepted = (required_role,) if isinstance(required_role, str) else tuple(required_role)
        if role not in accepted:
            logger.info(f"Token validation failed: role '{role}' not in {accepted}")
            return ValidationOutcome.invalid(ForbiddenError.kind)

        return ValidationOutcome.ok(Principal(subject_id=str(subject_id), role=role))
