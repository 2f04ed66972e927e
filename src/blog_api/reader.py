"""Queries behind the public read function: key check, key stamp, blog list, blog by slug."""

import logging

from shared import config
from shared.db import DataClient, Result, now_iso
from shared.projection import PUBLIC_BLOG_FIELDS, project_blog

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "published"
DEFAULT_LIMIT = 50
DEFAULT_OFFSET = 0

_BLOG_COLUMNS = ", ".join(PUBLIC_BLOG_FIELDS)


def _blogs_with_tags(client: DataClient):
    return (
        client.table(config.BLOGS_TABLE)
        .select(_BLOG_COLUMNS)
        .embed(
            "tags",
            through=config.POST_TAGS_TABLE,
            local="blog_id",
            remote="tag_id",
            target=config.TAGS_TABLE,
            key="tag",
            columns="name, slug, color",
        )
    )


def authenticate_key(client: DataClient, api_key: str) -> str | None:
    """Return the owning user id of an active key, else None."""
    result = (
        client.table(config.API_KEYS_TABLE)
        .select("user_id, is_active")
        .eq("api_key", api_key)
        .single()
        .execute()
    )
    if result.error or not result.data or not result.data.get("is_active"):
        return None
    return result.data["user_id"]


def touch_key(client: DataClient, api_key: str) -> None:
    """Best effort: a failed stamp is logged and otherwise ignored."""
    result = client.table(config.API_KEYS_TABLE).update({"last_used_at": now_iso()}).eq("api_key", api_key).execute()
    if result.error:
        logger.warning("Could not stamp last_used_at", extra={"error": result.error})


def list_blogs(
    client: DataClient,
    user_id: str,
    status: str = DEFAULT_STATUS,
    limit: int = DEFAULT_LIMIT,
    offset: int = DEFAULT_OFFSET,
) -> Result:
    """Newest published_at first; ``status="all"`` disables the status filter."""
    query = _blogs_with_tags(client).eq("user_id", user_id)
    if status != "all":
        query = query.eq("status", status)

    result = query.order("published_at", ascending=False).range(offset, offset + limit - 1).execute()
    if result.error:
        return result
    return Result(data=[project_blog(row) for row in result.data])


def get_blog(client: DataClient, user_id: str, slug: str) -> dict | None:
    result = (
        _blogs_with_tags(client)
        .eq("user_id", user_id)
        .eq("slug", slug)
        .eq("status", "published")
        .single()
        .execute()
    )
    if result.error or not result.data:
        return None
    return project_blog(result.data)
