from typing import Literal, Optional

from pydantic import BaseModel, Field

BlogStatus = Literal["draft", "published", "inactive"]
BlogFilter = Literal["all", "draft", "published", "inactive"]


# ── Auth ──────────────────────────────────────────────────────────────────────

class SignupRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    expires_at: str    # ISO datetime


# ── Profile ───────────────────────────────────────────────────────────────────

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    website: Optional[str] = None


# ── Blog ──────────────────────────────────────────────────────────────────────

class BlogCreate(BaseModel):
    title: str = Field(min_length=1)
    summary: Optional[str] = None
    content: str = ""          # rich-text/markdown body
    featured_image_url: Optional[str] = None
    status: BlogStatus = "draft"
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    tag_ids: list[str] = []


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None
    content: Optional[str] = None
    featured_image_url: Optional[str] = None
    status: Optional[BlogStatus] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    tag_ids: Optional[list[str]] = None  # replaces all links when given


# ── Tag ───────────────────────────────────────────────────────────────────────

class TagCreate(BaseModel):
    name: str = Field(min_length=1)
    color: str = "#3B82F6"


class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    color: Optional[str] = None


# ── API key ───────────────────────────────────────────────────────────────────

class ApiKeyCreate(BaseModel):
    name: str


class ApiKeyToggle(BaseModel):
    is_active: bool
