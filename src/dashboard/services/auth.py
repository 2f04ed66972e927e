"""Signup, login and logout. Each login opens a session row and a signed token."""

import hashlib
import logging

from dashboard.services.base import UNEXPECTED_ERROR, Outcome
from shared import config
from shared.auth import Session, hash_password, issue_token, session_expiry, verify_password
from shared.config import ConfigurationError
from shared.db import DataClient

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid login credentials"
ALREADY_REGISTERED = "User already registered"


def _login_context(email: str, user: dict | None) -> dict:
    if user is not None:
        return {"user_id": user["id"]}
    digest = hashlib.sha256(email.strip().lower().encode()).hexdigest()
    return {"email_sha256": digest[:12]}


class AuthService:
    def __init__(self, client: DataClient):
        self.client = client

    def _users(self):
        return self.client.table(config.USERS_TABLE)

    def _sessions(self):
        return self.client.table(config.SESSIONS_TABLE)

    def _find_user(self, email: str):
        return self._users().select().eq("email", email.strip().lower()).execute()

    def _open_session(self, user: dict) -> Outcome:
        expires_at = session_expiry()
        result = (
            self._sessions()
            .insert([{"user_id": user["id"], "email": user["email"], "expires_at": expires_at.isoformat()}])
            .select()
            .single()
            .execute()
        )
        if result.error:
            return Outcome(error=result.error)

        session = Session(user_id=user["id"], email=user["email"], session_id=result.data["id"])
        token = issue_token(session, expires_at)
        logger.info("Session opened", extra={"user_id": session.user_id, "session_id": session.session_id})
        return Outcome(
            data={
                "access_token": token,
                "token_type": "bearer",
                "user_id": session.user_id,
                "email": session.email,
                "expires_at": expires_at.isoformat(),
            }
        )

    def signup(self, email: str, password: str, name: str = "") -> Outcome:
        try:
            existing = self._find_user(email)
            if existing.error:
                return Outcome(error=existing.error)
            if existing.data:
                return Outcome(error=ALREADY_REGISTERED, status_code=409)

            row = {
                "email": email.strip().lower(),
                "password_hash": hash_password(password),
                "name": name,
                "bio": None,
                "avatar_url": None,
                "website": None,
            }
            created = self._users().insert([row]).select().single().execute()
            if created.error:
                return Outcome(error=created.error)

            logger.info("User registered", extra={"user_id": created.data["id"]})
            opened = self._open_session(created.data)
        except ConfigurationError:
            raise
        except Exception:
            logger.exception("Signup failed")
            return Outcome(error=UNEXPECTED_ERROR, status_code=500)

        if opened.ok:
            opened.message = "Account created successfully"
        return opened

    def login(self, email: str, password: str) -> Outcome:
        try:
            found = self._find_user(email)
            if found.error:
                return Outcome(error=found.error)

            user = found.data[0] if found.data else None
            if user is None or not verify_password(password, user.get("password_hash", "")):
                logger.warning("Login rejected", extra=_login_context(email, user))
                return Outcome(error=INVALID_CREDENTIALS, status_code=401)

            opened = self._open_session(user)
        except ConfigurationError:
            raise
        except Exception:
            logger.exception("Login failed")
            return Outcome(error=UNEXPECTED_ERROR, status_code=500)

        if opened.ok:
            opened.message = "Signed in successfully"
        return opened

    def logout(self, session: Session) -> Outcome:
        result = (
            self._sessions()
            .delete()
            .eq("id", session.session_id)
            .eq("user_id", session.user_id)
            .execute()
        )
        if result.error:
            return Outcome(error=result.error)

        logger.info("Session closed", extra={"user_id": session.user_id, "session_id": session.session_id})
        return Outcome(message="Signed out successfully")
