"""
Session tokens and password hashing for the dashboard.

Login and signup open a row in the sessions table and hand back an HS256 JWT:

    Authorization: Bearer <token>

The token carries ``sub`` (user id), ``sid`` (session row id), ``email`` and
``exp``. A token is only honoured while its session row exists, so logout is
immediate. The resolved ``Session`` is passed explicitly to every service.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from shared import config
from shared.db import DataClient, get_client

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    session_id: str


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return _pwd_context.verify(password, password_hash)


def session_expiry() -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=config.session_ttl_minutes())


def issue_token(session: Session, expires_at: datetime) -> str:
    secret = config.check_session_config()
    claims = {
        "sub": session.user_id,
        "sid": session.session_id,
        "email": session.email,
        "exp": expires_at,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    secret = config.check_session_config()
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except JWTError:
        raise _unauthorized("Invalid token")


def current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    client: DataClient = Depends(get_client),
) -> Session:
    """Dependency for every dashboard route that needs a signed-in user."""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    claims = decode_token(credentials.credentials)

    user_id = claims.get("sub")
    session_id = claims.get("sid")
    if not user_id or not session_id:
        raise _unauthorized("Invalid token")

    result = (
        client.table(config.SESSIONS_TABLE)
        .select("id, user_id")
        .eq("id", session_id)
        .eq("user_id", user_id)
        .execute()
    )
    if result.error or not result.data:
        raise _unauthorized("Session expired")

    return Session(user_id=user_id, email=claims.get("email", ""), session_id=session_id)
