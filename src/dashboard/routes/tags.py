"""Dashboard tag routes: list / create / update / delete under /api/tags."""

from fastapi import APIRouter, Depends, status

from dashboard.deps import mutation_response, tag_service, unwrap
from dashboard.services.tags import TagService
from shared.models import TagCreate, TagUpdate

router = APIRouter()


@router.get("/api/tags")
def list_tags(tags: TagService = Depends(tag_service)):
    return {"data": unwrap(tags.fetch_tags()).data}


@router.post("/api/tags", status_code=status.HTTP_201_CREATED)
def create_tag(tag: TagCreate, tags: TagService = Depends(tag_service)):
    return mutation_response(tags.create_tag(tag), tags.items)


@router.put("/api/tags/{tag_id}")
def update_tag(tag_id: str, changes: TagUpdate, tags: TagService = Depends(tag_service)):
    return mutation_response(tags.update_tag(tag_id, changes), tags.items)


@router.delete("/api/tags/{tag_id}")
def delete_tag(tag_id: str, tags: TagService = Depends(tag_service)):
    return mutation_response(tags.delete_tag(tag_id), tags.items)
