"""Per-request composition: the data client and the caller's session go into each service."""

from fastapi import Depends, HTTPException

from dashboard.services.api_keys import ApiKeyService
from dashboard.services.auth import AuthService
from dashboard.services.base import Outcome
from dashboard.services.blogs import BlogService
from dashboard.services.profile import ProfileService
from dashboard.services.tags import TagService
from shared.auth import Session, current_session
from shared.db import DataClient, get_client


def auth_service(client: DataClient = Depends(get_client)) -> AuthService:
    return AuthService(client)


def blog_service(
    session: Session = Depends(current_session),
    client: DataClient = Depends(get_client),
) -> BlogService:
    return BlogService(client, session)


def tag_service(
    session: Session = Depends(current_session),
    client: DataClient = Depends(get_client),
) -> TagService:
    return TagService(client, session)


def api_key_service(
    session: Session = Depends(current_session),
    client: DataClient = Depends(get_client),
) -> ApiKeyService:
    return ApiKeyService(client, session)


def profile_service(
    session: Session = Depends(current_session),
    client: DataClient = Depends(get_client),
) -> ProfileService:
    return ProfileService(client, session)


def unwrap(outcome: Outcome) -> Outcome:
    if outcome.error:
        raise HTTPException(status_code=outcome.status_code, detail=outcome.error)
    return outcome


def mutation_response(outcome: Outcome, items: list[dict]) -> dict:
    """Body for create/update/delete: the affected row plus the refetched list."""
    unwrap(outcome)
    return {"data": outcome.data, "message": outcome.message, "items": items}
