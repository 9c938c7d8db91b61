from typing import Any

from pydantic import BaseModel, Field

from src.components.validation import FieldViolation
from src.components.wizard import NavigationResult, WizardController
from src.domain.categories import BLOG_CATEGORIES, LISTING_CATEGORIES, PRICE_RANGES
from src.domain.entities import BlogPost, BusinessListing


# --- Auth ---
class Token(BaseModel):
    access_token: str
    token_type: str


class UserResponse(BaseModel):
    id: str
    email: str
    display_name: str
    roles: list[str]


# --- Directory ---
class CategoryOptionModel(BaseModel):
    value: str
    label: str
    icon: str = ""


class CategoriesResponse(BaseModel):
    listing_categories: list[CategoryOptionModel]
    price_ranges: list[CategoryOptionModel]
    blog_categories: list[str]

    @classmethod
    def build(cls) -> "CategoriesResponse":
        return cls(
            listing_categories=[CategoryOptionModel(**vars(c)) for c in LISTING_CATEGORIES],
            price_ranges=[CategoryOptionModel(**vars(p)) for p in PRICE_RANGES],
            blog_categories=list(BLOG_CATEGORIES),
        )


class ListingListResponse(BaseModel):
    listings: list[BusinessListing]
    total: int


class PostListResponse(BaseModel):
    posts: list[BlogPost]
    total: int


class OperationResponse(BaseModel):
    success: bool
    notification: str | None = None


# --- Moderation ---
class RejectRequest(BaseModel):
    reason: str = ""


class PublishRequest(BaseModel):
    published: bool


# --- Wizard ---
class ViolationModel(BaseModel):
    field: str
    message: str
    code: str = "invalid"

    @classmethod
    def from_violation(cls, v: FieldViolation) -> "ViolationModel":
        return cls(field=v.field, message=v.message, code=v.code)


class StepModel(BaseModel):
    number: int
    title: str
    description: str = ""


class StartWizardRequest(BaseModel):
    entity_id: str | None = None


class FieldsUpdateRequest(BaseModel):
    fields: dict[str, Any] = Field(default_factory=dict)


class WizardResponse(BaseModel):
    key: str
    kind: str
    current_step: int
    last_step: int
    completed_steps: list[int]
    reachable_steps: list[int]
    steps: list[StepModel]
    draft: dict[str, Any]
    pending_asset: str | None = None

    @classmethod
    def from_controller(cls, controller: WizardController) -> "WizardResponse":
        state = controller.state()
        return cls(
            key=state.key,
            kind=state.draft.kind,
            current_step=state.current_step,
            last_step=controller.last_step,
            completed_steps=list(state.completed_steps),
            reachable_steps=[
                s.number for s in state.steps if controller.can_go_to(s.number)
            ],
            steps=[StepModel(**vars(s)) for s in state.steps],
            draft=state.draft.model_dump(mode="json"),
            pending_asset=state.pending_asset,
        )


class FieldsUpdateResponse(BaseModel):
    derived_updated: list[str]
    wizard: WizardResponse


class NavigationResponse(BaseModel):
    success: bool
    notification: str | None = None
    violations: list[ViolationModel] = Field(default_factory=list)
    wizard: WizardResponse

    @classmethod
    def build(
        cls, result: NavigationResult, controller: WizardController
    ) -> "NavigationResponse":
        return cls(
            success=result.success,
            notification=result.notification,
            violations=[ViolationModel.from_violation(v) for v in result.violations],
            wizard=WizardResponse.from_controller(controller),
        )


class SubmitResponse(BaseModel):
    success: bool
    created: bool
    notification: str | None = None
    record: dict[str, Any]
