"""
Create/edit wizard for listings and blog posts.

A wizard is opened once, then driven one action per request until it is
submitted or discarded. Field edits go through the debounced autosaver;
navigation and submit write the draft immediately.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from src.adapters.clock import SystemClock
from src.adapters.draft_store import JsonFileDraftStore
from src.adapters.sqlite.repos import SQLiteListingRepo, SQLitePostRepo
from src.api.deps import (
    get_clock,
    get_draft_store,
    get_listing_repo,
    get_policy,
    get_post_repo,
    get_rules,
    get_session,
    get_submission_pipeline,
    get_upload_config,
    get_wizard_config,
    get_wizard_registry,
)
from src.api.errors import raise_for_failure
from src.api.schemas import (
    FieldsUpdateRequest,
    FieldsUpdateResponse,
    NavigationResponse,
    StartWizardRequest,
    SubmitResponse,
    WizardResponse,
)
from src.api.wizard_registry import WizardRegistry
from src.components.submission import AssetUpload, SubmissionPipeline, UploadConfig
from src.components.wizard import NavigationResult, WizardConfig, WizardController
from src.domain.drafts import DraftKind
from src.domain.entities import BlogPost, BusinessListing, SessionContext
from src.domain.errors import AssetUploadFailed
from src.domain.policy import PolicyEngine
from src.rules.models import Rules

router = APIRouter()

CREATE_PERMISSION: dict[str, str] = {"listing": "listing:create", "post": "post:create"}


class TagRequest(BaseModel):
    tag: str


def _open_controller(
    key: str,
    session: SessionContext = Depends(get_session),
    registry: WizardRegistry = Depends(get_wizard_registry),
) -> WizardController:
    controller = registry.get(session, key)
    if controller is None:
        raise HTTPException(status_code=404, detail="No open wizard for this draft")
    return controller


def _load_entity(
    kind: DraftKind,
    entity_id: str,
    listing_repo: SQLiteListingRepo,
    post_repo: SQLitePostRepo,
) -> BusinessListing | BlogPost:
    try:
        record_id = UUID(entity_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail="Record not found") from e
    entity = (
        listing_repo.get_by_id(record_id) if kind == "listing" else post_repo.get_by_id(record_id)
    )
    if entity is None:
        raise HTTPException(status_code=404, detail="Record not found")
    return entity


@router.post("/{kind}", response_model=WizardResponse)
def start_wizard(
    kind: DraftKind,
    req: StartWizardRequest,
    session: SessionContext = Depends(get_session),
    policy: PolicyEngine = Depends(get_policy),
    rules: Rules = Depends(get_rules),
    registry: WizardRegistry = Depends(get_wizard_registry),
    store: JsonFileDraftStore = Depends(get_draft_store),
    clock: SystemClock = Depends(get_clock),
    config: WizardConfig = Depends(get_wizard_config),
    listing_repo: SQLiteListingRepo = Depends(get_listing_repo),
    post_repo: SQLitePostRepo = Depends(get_post_repo),
) -> WizardResponse:
    """Open a create wizard, or an edit wizard when entity_id is given."""
    if not policy.check_permission(session, CREATE_PERMISSION[kind]):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")

    entity = None
    if req.entity_id:
        entity = _load_entity(kind, req.entity_id, listing_repo, post_repo)
        if isinstance(entity, BusinessListing) and not policy.can_edit_listing(
            session, entity.user_id
        ):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="You can only edit your own listings"
            )

    controller = registry.open(
        kind,
        session,
        store=store,
        clock=clock,
        config=config,
        debounce_seconds=rules.drafts.debounce_seconds,
        entity=entity,
    )
    return WizardResponse.from_controller(controller)


@router.get("/{key}", response_model=WizardResponse)
def get_wizard(controller: WizardController = Depends(_open_controller)) -> WizardResponse:
    return WizardResponse.from_controller(controller)


@router.patch("/{key}/fields", response_model=FieldsUpdateResponse)
def update_fields(
    req: FieldsUpdateRequest,
    controller: WizardController = Depends(_open_controller),
) -> FieldsUpdateResponse:
    try:
        updated = controller.set_fields(req.fields)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if controller.autosaver is not None:
        controller.autosaver.tick()
    return FieldsUpdateResponse(
        derived_updated=updated, wizard=WizardResponse.from_controller(controller)
    )


@router.post("/{key}/tags", response_model=WizardResponse)
def add_tag(
    req: TagRequest,
    controller: WizardController = Depends(_open_controller),
) -> WizardResponse:
    try:
        controller.add_tag(req.tag)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return WizardResponse.from_controller(controller)


@router.delete("/{key}/tags/{tag}", response_model=WizardResponse)
def remove_tag(
    tag: str, controller: WizardController = Depends(_open_controller)
) -> WizardResponse:
    controller.remove_tag(tag)
    return WizardResponse.from_controller(controller)


@router.post("/{key}/asset", response_model=WizardResponse)
async def select_asset(
    file: UploadFile = File(...),
    controller: WizardController = Depends(_open_controller),
    uploads: UploadConfig = Depends(get_upload_config),
) -> WizardResponse:
    """Hold an image for upload at submit time."""
    content_type = file.content_type or "application/octet-stream"
    try:
        uploads.check(content_type, file.size or 0)
        # One byte past the limit is enough to tell it is too big.
        data = await file.read(uploads.max_upload_bytes + 1)
        uploads.check(content_type, len(data))
    except AssetUploadFailed as e:
        raise_for_failure(e.code, str(e))
    controller.select_asset(
        AssetUpload(filename=file.filename or "upload", content_type=content_type, data=data)
    )
    return WizardResponse.from_controller(controller)


@router.delete("/{key}/asset", response_model=WizardResponse)
def clear_asset(controller: WizardController = Depends(_open_controller)) -> WizardResponse:
    controller.clear_asset()
    return WizardResponse.from_controller(controller)


def _navigated(controller: WizardController, result: NavigationResult) -> NavigationResponse:
    if controller.autosaver is not None:
        controller.autosaver.flush()
    return NavigationResponse.build(result, controller)


@router.post("/{key}/next", response_model=NavigationResponse)
def next_step(controller: WizardController = Depends(_open_controller)) -> NavigationResponse:
    return _navigated(controller, controller.go_next())


@router.post("/{key}/back", response_model=NavigationResponse)
def previous_step(controller: WizardController = Depends(_open_controller)) -> NavigationResponse:
    return _navigated(controller, controller.go_back())


@router.post("/{key}/steps/{step}", response_model=NavigationResponse)
def go_to_step(
    step: int, controller: WizardController = Depends(_open_controller)
) -> NavigationResponse:
    return _navigated(controller, controller.go_to_step(step))


@router.post("/{key}/submit", response_model=SubmitResponse)
def submit_wizard(
    key: str,
    session: SessionContext = Depends(get_session),
    registry: WizardRegistry = Depends(get_wizard_registry),
    controller: WizardController = Depends(_open_controller),
    pipeline: SubmissionPipeline = Depends(get_submission_pipeline),
) -> SubmitResponse:
    result = controller.submit(pipeline)
    if not result.success or result.record is None:
        raise_for_failure(
            result.error_code,
            result.notification,
            result.violations,
            redirect_to_login=result.redirect_to_login,
        )
    registry.close(session, key)
    return SubmitResponse(
        success=True,
        created=result.created,
        notification=result.notification,
        record=result.record.model_dump(mode="json"),
    )


@router.delete("/{key}", response_model=WizardResponse)
def discard_wizard(
    key: str,
    session: SessionContext = Depends(get_session),
    registry: WizardRegistry = Depends(get_wizard_registry),
    controller: WizardController = Depends(_open_controller),
) -> WizardResponse:
    """
    Discard the saved draft and close the wizard.

    The response shows the initial values a fresh start would open with.
    """
    controller.discard()
    registry.close(session, key)
    return WizardResponse.from_controller(controller)
