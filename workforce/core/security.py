# workforce/core/security.py
# Handles password hashing, JWTs, and resolving a request into a session.
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session as DbSession, joinedload

from workforce.core.config import settings
from workforce.core.enums import Role
from workforce.db.models import User
from workforce.db.session import get_db

# --- Password Hashing ---
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
def verify_password(plain: str, hashed: str) -> bool: return pwd_context.verify(plain, hashed)
def get_password_hash(pwd: str) -> str: return pwd_context.hash(pwd)


# --- Sessions ---
@dataclass(frozen=True)
class Anonymous:
    kind: str = "anonymous"


@dataclass(frozen=True)
class Identified:
    id: int
    name: Optional[str]
    email: str
    role: Role
    employee_id: Optional[int] = None
    kind: str = "identified"


Session = Union[Anonymous, Identified]


# --- JWT Creation ---
def create_access_token(user, expires_minutes: Optional[int] = None) -> str:
    """ Signs a token carrying everything a session needs, so resolving it never touches the database. """
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    employee = getattr(user, "employee", None)
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
        "role": Role(user.role).value,
        "employee_id": employee.id if employee is not None else None,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_session(token: Optional[str]) -> Session:
    if not token:
        return Anonymous()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return Identified(
            id=int(payload["sub"]),
            name=payload.get("name"),
            email=payload["email"],
            role=Role(payload["role"]),
            employee_id=payload.get("employee_id"),
        )
    except (JWTError, KeyError, ValueError, TypeError):
        return Anonymous()


# --- Request Dependency ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth.token", auto_error=False)

def get_session(token: Optional[str] = Depends(oauth2_scheme), db: DbSession = Depends(get_db)) -> Session:
    """
    Resolves the caller from the token and then from the user row it names, so a role change,
    a removed account or an unlinked employee profile takes effect on the next request.
    """
    claims = decode_session(token)
    if not isinstance(claims, Identified):
        return claims
    user = db.query(User).options(joinedload(User.employee)).filter(User.id == claims.id).first()
    if user is None:
        return Anonymous()
    return Identified(
        id=user.id,
        name=user.name,
        email=user.email,
        role=Role(user.role),
        employee_id=user.employee_id,
    )
