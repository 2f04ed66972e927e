from dashboard.services.base import DomainService, Outcome, guarded
from shared import config
from shared.models import ProfileUpdate

PROFILE_COLUMNS = "id, email, name, bio, avatar_url, website, created_at, updated_at"


class ProfileService(DomainService):
    def _users(self):
        return self.client.table(config.USERS_TABLE)

    @guarded
    def get_profile(self) -> Outcome:
        result = self._users().select(PROFILE_COLUMNS).eq("id", self.user_id).single().execute()
        if result.error:
            return self.failed(result.error)
        return Outcome(data=result.data)

    @guarded
    def update_profile(self, changes: ProfileUpdate) -> Outcome:
        values = changes.model_dump(exclude_none=True)
        if not values:
            return self.failed("No fields to update")

        result = (
            self._users()
            .update(values)
            .eq("id", self.user_id)
            .select(PROFILE_COLUMNS)
            .single()
            .execute()
        )
        if result.error:
            return self.failed(result.error)
        return self.succeeded("Profile updated successfully", result.data)
