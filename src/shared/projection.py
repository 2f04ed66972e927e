"""Post-query projections from the store's nested join shape to API shapes.

Input row (as returned by ``Query.embed("tags", ..., key="tag")``):

    {"id": ..., "title": ..., "tags": [{"tag": {"name": ..., ...}}, {"tag": None}]}

Output row:

    {"id": ..., "title": ..., "tags": [{"name": ..., ...}]}
"""

PUBLIC_BLOG_FIELDS = (
    "id",
    "title",
    "slug",
    "summary",
    "content",
    "featured_image_url",
    "status",
    "reading_time",
    "published_at",
    "created_at",
    "updated_at",
)

PUBLIC_TAG_FIELDS = ("name", "slug", "color")


def flatten_tags(row: dict) -> dict:
    """Replace ``tags`` join entries with the tags they point at; dangling links are dropped."""
    links = row.get("tags") or []
    return {**row, "tags": [link["tag"] for link in links if link.get("tag")]}


def project_blog(row: dict) -> dict:
    """Public read shape: the fixed field set plus flattened ``{name, slug, color}`` tags."""
    flat = flatten_tags(row)
    out = {name: flat.get(name) for name in PUBLIC_BLOG_FIELDS}
    out["tags"] = [{name: tag.get(name) for name in PUBLIC_TAG_FIELDS} for tag in flat["tags"]]
    return out
