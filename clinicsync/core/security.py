from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import HTTPException, status
from enum import Enum
import secrets

from .config import settings

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

class UserRole(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"

# Gate rejection messages
NOT_AUTHORIZED = "Not Authorized. Login Again"
TOKEN_INVALID = "Token Invalid or Expired"
INVALID_ADMIN = "Forbidden: Invalid Admin"

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

# JWT utilities
def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed JWT carrying ``data`` as claims."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.ALGORITHM
    )
    return encoded_jwt

def create_admin_token() -> str:
    """Issue the credential for the configured administrator."""
    return create_access_token({
        "email": settings.ADMIN_EMAIL,
        "role": UserRole.ADMIN.value
    })

def create_role_token(account_id: int, role: UserRole) -> str:
    """Issue a credential for a doctor or patient account."""
    return create_access_token({
        "id": account_id,
        "role": role.value
    })

def decode_token(token: str) -> dict:
    """Verify signature and expiry, returning the claims.

    Raises ``AuthorizationError`` for malformed, expired or forged tokens.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        raise AuthorizationError(TOKEN_INVALID)

def is_admin_identity(email: Optional[str]) -> bool:
    """Compare an identity claim against the configured admin email."""
    if not isinstance(email, str):
        return False
    return secrets.compare_digest(email.encode(), settings.ADMIN_EMAIL.encode())

# Security exceptions
class AuthenticationError(HTTPException):
    def __init__(self, detail: str = NOT_AUTHORIZED):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class AuthorizationError(HTTPException):
    def __init__(self, detail: str = TOKEN_INVALID):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )
