from fastapi import Request
from typing import Iterable, Optional
import logging

from ..core.security import (
    decode_token, is_admin_identity, AuthenticationError,
    AuthorizationError, UserRole, INVALID_ADMIN
)

logger = logging.getLogger(__name__)

BEARER = "authorization"

# Where each gate looks for a credential, in order of preference
ADMIN_TOKEN_SOURCES = ("atoken", BEARER, "x-access-token")
DOCTOR_TOKEN_SOURCES = ("dtoken", BEARER)
PATIENT_TOKEN_SOURCES = ("token", BEARER)

def extract_credential(request: Request, sources: Iterable[str]) -> Optional[str]:
    """Return the first credential found among ``sources``.

    ``authorization`` is read as ``<scheme> <token>``; every other source
    is a custom header holding the raw token.
    """
    for name in sources:
        value = request.headers.get(name)
        if not value:
            continue
        if name == BEARER:
            parts = value.split(" ")
            if len(parts) > 1 and parts[1]:
                return parts[1]
            continue
        return value
    return None

def _verified_claims(request: Request, sources: Iterable[str]) -> dict:
    token = extract_credential(request, sources)
    if not token:
        raise AuthenticationError()
    return decode_token(token)

async def require_admin(request: Request) -> dict:
    """Admit only requests carrying the configured admin's credential."""
    claims = _verified_claims(request, ADMIN_TOKEN_SOURCES)

    if not is_admin_identity(claims.get("email")):
        logger.warning(f"Admin gate rejected identity on {request.url.path}")
        raise AuthorizationError(INVALID_ADMIN)

    return claims

def require_role(role: UserRole, sources: Iterable[str]):
    """Create a dependency admitting credentials issued to ``role``.

    The dependency resolves to the account id carried by the token.
    """
    async def role_checker(request: Request) -> int:
        claims = _verified_claims(request, sources)
        account_id = claims.get("id")
        if claims.get("role") != role.value or not isinstance(account_id, int):
            raise AuthorizationError(f"Forbidden: Invalid {role.value.capitalize()}")
        return account_id

    return role_checker

require_doctor = require_role(UserRole.DOCTOR, DOCTOR_TOKEN_SOURCES)
require_patient = require_role(UserRole.PATIENT, PATIENT_TOKEN_SOURCES)
