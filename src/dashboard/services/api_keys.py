"""API keys that let third parties read a user's blogs through the public function."""

import secrets

from dashboard.services.base import DomainService, Outcome, guarded
from shared import config

NOT_FOUND = "API key not found"


def generate_api_key() -> str:
    return f"{config.API_KEY_PREFIX}{secrets.token_hex(32)}"


def mask_key(key: str) -> str:
    """Display form: first 8 and last 4 characters around a fixed run of dots."""
    return f"{key[:8]}{'•' * 24}{key[-4:]}"


class ApiKeyService(DomainService):
    def _keys(self):
        return self.client.table(config.API_KEYS_TABLE)

    @guarded
    def fetch_api_keys(self) -> Outcome:
        result = (
            self._keys()
            .select()
            .eq("user_id", self.user_id)
            .order("created_at", ascending=False)
            .execute()
        )
        if result.error:
            return self.failed(result.error)

        self.items = result.data
        return Outcome(data=self.items)

    @guarded
    def create_api_key(self, name: str) -> Outcome:
        name = (name or "").strip()
        if not name:
            return self.failed("API key name is required")

        row = {
            "user_id": self.user_id,
            "name": name,
            "api_key": generate_api_key(),
            "is_active": True,
            "last_used_at": None,
        }
        result = self._keys().insert([row]).select().single().execute()
        if result.error:
            return self.failed(result.error)

        self.fetch_api_keys()
        return self.succeeded("API key created successfully", result.data)

    @guarded
    def delete_api_key(self, key_id: str) -> Outcome:
        result = self._keys().delete().eq("id", key_id).eq("user_id", self.user_id).execute()
        if result.error:
            return self.failed(result.error)
        if not result.data:
            return self.failed(NOT_FOUND, 404)

        self.fetch_api_keys()
        return self.succeeded("API key deleted successfully")

    @guarded
    def toggle_api_key(self, key_id: str, is_active: bool) -> Outcome:
        result = (
            self._keys()
            .update({"is_active": is_active})
            .eq("id", key_id)
            .eq("user_id", self.user_id)
            .execute()
        )
        if result.error:
            return self.failed(result.error)
        if not result.data:
            return self.failed(NOT_FOUND, 404)

        self.fetch_api_keys()
        state = "activated" if is_active else "deactivated"
        return self.succeeded(f"API key {state} successfully", result.data[0])
