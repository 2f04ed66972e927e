"""Common plumbing for the per-entity dashboard services.

A service is built per request from the data client and the caller's
session. Each operation returns an ``Outcome`` instead of raising: store
errors are passed through as strings, anything unexpected is logged and
reported generically. After a successful mutation the service refetches its
full list into ``items``.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any

from shared.auth import Session
from shared.db import DataClient

logger = logging.getLogger(__name__)

NO_USER_ERROR = "No user logged in"
UNEXPECTED_ERROR = "An unexpected error occurred"


@dataclass
class Outcome:
    data: Any = None
    error: str | None = None
    message: str | None = None
    status_code: int = 400   # HTTP status the route uses when error is set

    @property
    def ok(self) -> bool:
        return self.error is None


def guarded(method):
    """Require a session and turn unexpected exceptions into an error Outcome."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs) -> Outcome:
        if self.session is None:
            return Outcome(error=NO_USER_ERROR, status_code=401)
        try:
            return method(self, *args, **kwargs)
        except Exception:
            logger.exception(
                "Unexpected failure in %s.%s",
                type(self).__name__,
                method.__name__,
                extra={"user_id": self.session.user_id},
            )
            return Outcome(error=UNEXPECTED_ERROR, status_code=500)

    return wrapper


class DomainService:
    def __init__(self, client: DataClient, session: Session | None):
        self.client = client
        self.session = session
        self.items: list[dict] = []

    @property
    def user_id(self) -> str:
        return self.session.user_id

    def succeeded(self, message: str, data: Any = None) -> Outcome:
        logger.info(message, extra={"user_id": self.user_id})
        return Outcome(data=data, message=message)

    def failed(self, error: str, status_code: int = 400) -> Outcome:
        logger.warning(error, extra={"user_id": self.user_id, "service": type(self).__name__})
        return Outcome(error=error, status_code=status_code)
