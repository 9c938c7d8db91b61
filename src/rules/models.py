from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class AuthRules(BaseModel):
    token_ttl_minutes: int = 1440
    password_min_length: int = 8

class RbacRules(BaseModel):
    roles: dict[str, list[str]]
    public_permissions: list[str]

class ValidationRules(BaseModel):
    slug_pattern: str = r"^[a-z0-9-]+$"
    listing_title_min: int = 5
    listing_title_max: int = 200
    body_min: int = 50
    phone_min: int = 10
    address_min: int = 10
    city_min: int = 2

class DerivationRules(BaseModel):
    words_per_minute: int = Field(default=200, gt=0)
    excerpt_max: int = 160
    meta_description_max: int = 160

class UploadsRules(BaseModel):
    max_upload_bytes: int
    allowlist_mime_types: list[str]
    buckets: dict[str, str]

class DraftsRules(BaseModel):
    debounce_seconds: float = 1.0
    # Open wizards untouched this long are dropped from memory.
    idle_minutes: int = 60

class ListingsRules(BaseModel):
    public_requires_approval: bool = True

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    project: ProjectRules
    auth: AuthRules
    rbac: RbacRules
    validation: ValidationRules
    derivation: DerivationRules
    uploads: UploadsRules
    drafts: DraftsRules
    listings: ListingsRules
    ops: OpsRules
