"""Dashboard API-key routes under /api/api-keys.

Listing masks every key unless ``reveal=true``; creation always returns the
full key so it can be copied once.
"""

from fastapi import APIRouter, Depends, status

from dashboard.deps import api_key_service, mutation_response, unwrap
from dashboard.services.api_keys import ApiKeyService, mask_key
from shared.models import ApiKeyCreate, ApiKeyToggle

router = APIRouter()


def _masked(rows: list[dict]) -> list[dict]:
    return [{**row, "api_key": mask_key(row["api_key"])} for row in rows]


@router.get("/api/api-keys")
def list_api_keys(reveal: bool = False, keys: ApiKeyService = Depends(api_key_service)):
    rows = unwrap(keys.fetch_api_keys()).data
    return {"data": rows if reveal else _masked(rows)}


@router.post("/api/api-keys", status_code=status.HTTP_201_CREATED)
def create_api_key(req: ApiKeyCreate, keys: ApiKeyService = Depends(api_key_service)):
    outcome = keys.create_api_key(req.name)
    return mutation_response(outcome, _masked(keys.items))


@router.patch("/api/api-keys/{key_id}")
def toggle_api_key(key_id: str, req: ApiKeyToggle, keys: ApiKeyService = Depends(api_key_service)):
    outcome = keys.toggle_api_key(key_id, req.is_active)
    if outcome.ok:
        outcome.data = {**outcome.data, "api_key": mask_key(outcome.data["api_key"])}
    return mutation_response(outcome, _masked(keys.items))


@router.delete("/api/api-keys/{key_id}")
def delete_api_key(key_id: str, keys: ApiKeyService = Depends(api_key_service)):
    outcome = keys.delete_api_key(key_id)
    return mutation_response(outcome, _masked(keys.items))
