from dashboard.services.base import DomainService, Outcome, guarded
from shared import config
from shared.models import TagCreate, TagUpdate
from shared.text import generate_slug

NOT_FOUND = "Tag not found"


class TagService(DomainService):
    def _tags(self):
        return self.client.table(config.TAGS_TABLE)

    @guarded
    def fetch_tags(self) -> Outcome:
        result = self._tags().select().eq("user_id", self.user_id).order("name").execute()
        if result.error:
            return self.failed(result.error)

        self.items = result.data
        return Outcome(data=self.items)

    @guarded
    def create_tag(self, tag: TagCreate) -> Outcome:
        row = {
            "user_id": self.user_id,
            "name": tag.name,
            "slug": generate_slug(tag.name),
            "color": tag.color,
        }
        result = self._tags().insert([row]).select().single().execute()
        if result.error:
            return self.failed(result.error)

        self.fetch_tags()
        return self.succeeded("Tag created successfully", result.data)

    @guarded
    def update_tag(self, tag_id: str, changes: TagUpdate) -> Outcome:
        values = changes.model_dump(exclude_none=True)
        if not values:
            return self.failed("No fields to update")
        if "name" in values:
            values["slug"] = generate_slug(values["name"])

        result = self._tags().update(values).eq("id", tag_id).eq("user_id", self.user_id).execute()
        if result.error:
            return self.failed(result.error)
        if not result.data:
            return self.failed(NOT_FOUND, 404)

        self.fetch_tags()
        return self.succeeded("Tag updated successfully", result.data[0])

    @guarded
    def delete_tag(self, tag_id: str) -> Outcome:
        result = self._tags().delete().eq("id", tag_id).eq("user_id", self.user_id).execute()
        if result.error:
            return self.failed(result.error)
        if not result.data:
            return self.failed(NOT_FOUND, 404)

        links = self.client.table(config.POST_TAGS_TABLE).delete().eq("tag_id", tag_id).execute()
        if links.error:
            return self.failed(links.error)

        self.fetch_tags()
        return self.succeeded("Tag deleted successfully")
