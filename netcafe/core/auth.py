"""
Password hashing and JWT utilities
"""

from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from typing import Dict, Optional

from netcafe.core.config import Settings, get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MASTER_SCOPE = "master"
TENANT_SCOPE = "tenant"


def hash_password(password: str) -> str:
    """Salted bcrypt hash"""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Compare a password with a stored hash; a missing hash never matches"""
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)


def create_access_token(
    subject: str,
    email: str,
    tenant: str,
    scope: str,
    role_id: Optional[int] = None,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a JWT for a master (tenant owner) or tenant (staff user) session.

    `tenant` is the tenant's subdomain, the key tenant-scoped requests are
    resolved by. Signing uses `settings` when given, else the process-wide
    settings.
    """
    settings = settings or get_settings()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": subject,
        "email": email,
        "tenant": tenant,
        "scope": scope,
        "exp": expire,
        "iat": datetime.utcnow(),
    }
    if role_id is not None:
        to_encode["role_id"] = role_id

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Optional[Dict]:
    """Decode and validate JWT token"""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
