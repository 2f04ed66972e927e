import os

ENV = os.getenv("ENV", "production")
AWS_REGION = os.getenv("AWS_REGION", "")

DYNAMODB_ENDPOINT = os.getenv("DYNAMODB_ENDPOINT")  # local only (http://localhost:8002)

USERS_TABLE = os.getenv("DYNAMODB_USERS_TABLE", "users")
SESSIONS_TABLE = os.getenv("DYNAMODB_SESSIONS_TABLE", "user_sessions")
BLOGS_TABLE = os.getenv("DYNAMODB_BLOGS_TABLE", "blogs")
TAGS_TABLE = os.getenv("DYNAMODB_TAGS_TABLE", "blog_tags")
POST_TAGS_TABLE = os.getenv("DYNAMODB_POST_TAGS_TABLE", "blog_post_tags")
API_KEYS_TABLE = os.getenv("DYNAMODB_API_KEYS_TABLE", "user_api_keys")

SESSION_SECRET = os.getenv("SESSION_SECRET", "")
SESSION_TTL_MINUTES = os.getenv("SESSION_TTL_MINUTES", str(60 * 24 * 7))  # validated by session_ttl_minutes()

API_KEY_PREFIX = os.getenv("API_KEY_PREFIX", "bk_")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class ConfigurationError(RuntimeError):
    """Raised when a required setting is absent or malformed. Remote calls are refused until fixed."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing or invalid configuration: {', '.join(missing)}")


def check_store_config() -> dict:
    """Return boto3 resource kwargs for the store, or raise ConfigurationError."""
    if not AWS_REGION:
        raise ConfigurationError(["AWS_REGION"])

    kwargs: dict = {"region_name": AWS_REGION}
    # Injected into boto3 calls when running locally
    if ENV == "local" and DYNAMODB_ENDPOINT:
        kwargs["endpoint_url"] = DYNAMODB_ENDPOINT
    return kwargs


def check_session_config() -> str:
    if not SESSION_SECRET:
        raise ConfigurationError(["SESSION_SECRET"])
    return SESSION_SECRET


def session_ttl_minutes() -> int:
    try:
        minutes = int(SESSION_TTL_MINUTES)
    except ValueError:
        raise ConfigurationError(["SESSION_TTL_MINUTES"]) from None
    if minutes <= 0:
        raise ConfigurationError(["SESSION_TTL_MINUTES"])
    return minutes
