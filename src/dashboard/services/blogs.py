"""Blog operations for the signed-in user: list, create, update, delete, publish."""

import logging
from collections import Counter

from dashboard.services.base import DomainService, Outcome, guarded
from shared import config
from shared.db import now_iso
from shared.models import BlogCreate, BlogUpdate
from shared.projection import flatten_tags
from shared.text import calculate_reading_time, generate_slug

BLOG_STATUSES = ("draft", "published", "inactive")

logger = logging.getLogger(__name__)

NOT_FOUND = "Blog not found"
DUPLICATE_SLUG = "A blog with this slug already exists"


class BlogService(DomainService):
    def _blogs(self):
        return self.client.table(config.BLOGS_TABLE)

    def _links(self):
        return self.client.table(config.POST_TAGS_TABLE)

    def _find(self, blog_id: str):
        return self._blogs().select().eq("id", blog_id).eq("user_id", self.user_id).execute()

    def _slug_conflict(self, slug: str, blog_id: str | None = None) -> str | None:
        result = self._blogs().select("id").eq("user_id", self.user_id).eq("slug", slug).execute()
        if result.error:
            return result.error
        if any(row["id"] != blog_id for row in result.data):
            return DUPLICATE_SLUG
        return None

    def _link_tags(self, blog_id: str, tag_ids: list[str]) -> str | None:
        """Point the blog at exactly ``tag_ids``. Tags owned by other users are ignored."""
        removed = self._links().delete().eq("blog_id", blog_id).execute()
        if removed.error:
            return removed.error
        if not tag_ids:
            return None

        owned = (
            self.client.table(config.TAGS_TABLE)
            .select("id")
            .eq("user_id", self.user_id)
            .in_("id", tag_ids)
            .execute()
        )
        if owned.error:
            return owned.error

        owned_ids = {row["id"] for row in owned.data}
        rows = [{"blog_id": blog_id, "tag_id": t} for t in dict.fromkeys(tag_ids) if t in owned_ids]
        if not rows:
            return None
        return self._links().insert(rows).execute().error

    # ── Operations ────────────────────────────────────────────────────────────

    @guarded
    def fetch_blogs(self) -> Outcome:
        result = (
            self._blogs()
            .select()
            .eq("user_id", self.user_id)
            .embed(
                "tags",
                through=config.POST_TAGS_TABLE,
                local="blog_id",
                remote="tag_id",
                target=config.TAGS_TABLE,
                key="tag",
            )
            .order("updated_at", ascending=False)
            .execute()
        )
        if result.error:
            return self.failed(result.error)

        self.items = [flatten_tags(row) for row in result.data]
        return Outcome(data=self.items)

    @guarded
    def create_blog(self, blog: BlogCreate) -> Outcome:
        values = blog.model_dump(exclude={"tag_ids"})
        values["slug"] = generate_slug(blog.title)
        values["reading_time"] = calculate_reading_time(blog.content)
        values["published_at"] = now_iso() if blog.status == "published" else None

        conflict = self._slug_conflict(values["slug"])
        if conflict:
            return self.failed(conflict, 409 if conflict == DUPLICATE_SLUG else 400)

        result = self._blogs().insert([{**values, "user_id": self.user_id}]).select().single().execute()
        if result.error:
            return self.failed(result.error)

        # Not atomic with the insert: a failure here leaves the blog without tags.
        link_error = self._link_tags(result.data["id"], blog.tag_ids)
        if link_error:
            return self.failed(link_error)

        self.fetch_blogs()
        return self.succeeded("Blog created successfully", result.data)

    @guarded
    def update_blog(self, blog_id: str, changes: BlogUpdate) -> Outcome:
        values = changes.model_dump(exclude_none=True, exclude={"tag_ids"})
        if not values and changes.tag_ids is None:
            return self.failed("No fields to update")

        found = self._find(blog_id)
        if found.error:
            return self.failed(found.error)
        if not found.data:
            return self.failed(NOT_FOUND, 404)
        current = found.data[0]

        if "title" in values:
            values["slug"] = generate_slug(values["title"])
            conflict = self._slug_conflict(values["slug"], blog_id)
            if conflict:
                return self.failed(conflict, 409 if conflict == DUPLICATE_SLUG else 400)

        if "content" in values:
            values["reading_time"] = calculate_reading_time(values["content"])

        # published_at is stamped once, on the first transition to published.
        if values.get("status") == "published" and not current.get("published_at"):
            values["published_at"] = now_iso()

        updated = current
        if values:
            result = (
                self._blogs()
                .update(values)
                .eq("id", blog_id)
                .eq("user_id", self.user_id)
                .select()
                .single()
                .execute()
            )
            if result.error:
                return self.failed(result.error)
            updated = result.data

        if changes.tag_ids is not None:
            link_error = self._link_tags(blog_id, changes.tag_ids)
            if link_error:
                return self.failed(link_error)

        self.fetch_blogs()
        return self.succeeded("Blog updated successfully", updated)

    @guarded
    def delete_blog(self, blog_id: str) -> Outcome:
        result = self._blogs().delete().eq("id", blog_id).eq("user_id", self.user_id).execute()
        if result.error:
            return self.failed(result.error)
        if not result.data:
            return self.failed(NOT_FOUND, 404)

        links = self._links().delete().eq("blog_id", blog_id).execute()
        if links.error:
            logger.warning(
                "Blog deleted but tag links remain",
                extra={"blog_id": blog_id, "error": links.error},
            )

        self.fetch_blogs()
        return self.succeeded("Blog deleted successfully")

    def publish_blog(self, blog_id: str) -> Outcome:
        return self.update_blog(blog_id, BlogUpdate(status="published"))

    def unpublish_blog(self, blog_id: str) -> Outcome:
        return self.update_blog(blog_id, BlogUpdate(status="inactive"))

    # ── Views over the cached list ────────────────────────────────────────────

    def filter_blogs(self, status: str = "all") -> list[dict]:
        if status == "all":
            return list(self.items)
        return [blog for blog in self.items if blog.get("status") == status]

    def status_counts(self) -> dict[str, int]:
        counts = Counter(blog.get("status") for blog in self.items)
        return {"all": len(self.items), **{s: counts.get(s, 0) for s in BLOG_STATUSES}}
