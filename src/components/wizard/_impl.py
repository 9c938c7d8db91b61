"""
Multi-step wizard state for listing and blog post forms.

The controller owns one draft, the current step and the set of completed
steps. Moving forward requires the current step to validate; moving back
never does.
"""

from __future__ import annotations

import logging
from functools import cache
from typing import Any

from pydantic import TypeAdapter

from src.components.derive import derivations_for, record_user_edit, refresh_derived
from src.components.drafts import DraftAutosaver, key_for
from src.components.submission import AssetUpload, SubmissionOutput, SubmissionPipeline
from src.components.validation import FieldViolation, validate_all, validate_step
from src.domain.drafts import ListingDraft, PostDraft
from src.domain.entities import BlogPost, BusinessListing, SessionContext

from .models import (
    LISTING_STEPS,
    POST_STEPS,
    NavigationResult,
    StepDefinition,
    WizardConfig,
    WizardState,
)
from .ports import ViewportPort

logger = logging.getLogger(__name__)

# Only select_asset()/clear_asset() may touch these.
_ASSET_FIELDS = frozenset({"featured_image_preview"})


@cache
def _field_adapter(draft_type: type, name: str) -> TypeAdapter[Any]:
    return TypeAdapter(draft_type.model_fields[name].annotation)


# --- Entity -> draft ---


def listing_to_draft(listing: BusinessListing) -> ListingDraft:
    """Pre-fill a draft from a stored listing. Nothing is auto-derived."""
    return ListingDraft(
        entity_id=listing.id,
        category=listing.category,
        title=listing.title,
        slug=listing.slug,
        description=listing.description,
        address=listing.address,
        city=listing.city,
        state=listing.state or "",
        postal_code=listing.postal_code or "",
        phone=listing.phone,
        email=listing.email or "",
        website=listing.website or "",
        whatsapp_number=listing.whatsapp_number or "",
        featured_image_url=listing.featured_image_url or "",
        featured_image_alt=listing.featured_image_alt or "",
        price_range=listing.price_range or "",
        amenities=", ".join(listing.amenities),
        meta_title=listing.meta_title or "",
        meta_description=listing.meta_description or "",
        keywords=", ".join(listing.keywords),
        is_published=listing.is_published,
    )


def post_to_draft(post: BlogPost) -> PostDraft:
    """Pre-fill a draft from a stored post. Read time keeps following the content."""
    return PostDraft(
        entity_id=post.id,
        title=post.title,
        slug=post.slug,
        category=post.category,
        content=post.content,
        excerpt=post.excerpt,
        featured_image_url=post.featured_image_url or "",
        featured_image_alt=post.featured_image_alt or "",
        meta_description=post.meta_description or "",
        tags=list(post.tags),
        read_time=post.read_time,
        is_featured=post.is_featured,
        published=post.published,
        auto_derived={"read_time"},
    )


# --- Controller ---


class WizardController:
    def __init__(
        self,
        draft: ListingDraft | PostDraft,
        *,
        session: SessionContext | None = None,
        config: WizardConfig | None = None,
        autosaver: DraftAutosaver | None = None,
        viewport: ViewportPort | None = None,
        initial: ListingDraft | PostDraft | None = None,
    ) -> None:
        self.draft = draft
        # What discard() resets to: the stored entity, or a blank draft.
        self._initial = (initial or draft).model_copy(deep=True)
        self.session = session
        self.config = config or WizardConfig()
        self.autosaver = autosaver
        self.viewport = viewport
        self.steps: tuple[StepDefinition, ...] = (
            LISTING_STEPS if isinstance(draft, ListingDraft) else POST_STEPS
        )
        self.current_step = 1
        self.completed_steps: set[int] = set()
        self.pending_asset: AssetUpload | None = None

    @property
    def key(self) -> str:
        return key_for(self.draft)

    @property
    def last_step(self) -> int:
        return len(self.steps)

    @property
    def is_last_step(self) -> bool:
        return self.current_step == self.last_step

    def state(self) -> WizardState:
        return WizardState(
            key=self.key,
            current_step=self.current_step,
            completed_steps=tuple(sorted(self.completed_steps)),
            steps=self.steps,
            draft=self.draft,
            pending_asset=self.pending_asset.filename if self.pending_asset else None,
        )

    # --- Editing ---

    def set_field(self, name: str, value: Any) -> list[str]:
        return self.set_fields({name: value})

    def set_fields(self, values: dict[str, Any]) -> list[str]:
        """
        Apply one user edit and refresh dependent derived fields.

        All values are checked before any is applied. A derived field given
        in the same edit as its source keeps the given value. Returns the
        derived fields that changed as a result. Raises ValueError for
        unknown fields or values of the wrong type.
        """
        draft_type = type(self.draft)
        coerced: dict[str, Any] = {}
        for name, value in values.items():
            if name not in draft_type.form_fields() or name in _ASSET_FIELDS:
                raise ValueError(f"Unknown field: {name}")
            coerced[name] = _field_adapter(draft_type, name).validate_python(value)

        # Sources first, so typed derived values are compared against fresh sources.
        derived = derivations_for(self.draft)
        ordered = sorted(coerced, key=lambda n: n in derived)
        for name in ordered:
            record_user_edit(self.draft, name, coerced[name], self.config.derivation)

        updated: dict[str, None] = {}
        for name in ordered:
            for target in refresh_derived(
                self.draft, name, self.config.derivation, explicit=coerced
            ):
                updated[target] = None
        self._autosave()
        return list(updated)

    def add_tag(self, tag: str) -> bool:
        if not isinstance(self.draft, PostDraft):
            raise ValueError("Only posts have tags")
        tag = tag.strip()
        if not tag or tag in self.draft.tags:
            return False
        self.draft.tags = [*self.draft.tags, tag]
        self.draft.touched.add("tags")
        self._autosave()
        return True

    def remove_tag(self, tag: str) -> bool:
        if not isinstance(self.draft, PostDraft) or tag not in self.draft.tags:
            return False
        self.draft.tags = [t for t in self.draft.tags if t != tag]
        self.draft.touched.add("tags")
        self._autosave()
        return True

    def select_asset(self, asset: AssetUpload) -> None:
        """Hold a picked image until submit; the draft only records its name."""
        self.pending_asset = asset
        self.draft.featured_image_preview = asset.filename
        self._autosave()

    def clear_asset(self) -> None:
        self.pending_asset = None
        self.draft.featured_image_preview = ""
        self.draft.featured_image_url = ""
        self.draft.featured_image_alt = ""
        self._autosave()

    # --- Navigation ---

    def go_next(self) -> NavigationResult:
        violations = validate_step(self.draft, self.current_step, self.config.validation)
        if violations:
            return NavigationResult(False, self.current_step, violations)

        self.completed_steps.add(self.current_step)
        if self.current_step < self.last_step:
            self._move_to(self.current_step + 1)
        return NavigationResult(True, self.current_step)

    def go_back(self) -> NavigationResult:
        if self.current_step <= 1:
            return NavigationResult(False, self.current_step)
        self._move_to(self.current_step - 1)
        return NavigationResult(True, self.current_step)

    def can_go_to(self, step: int) -> bool:
        if step < 1 or step > self.last_step:
            return False
        return step in self.completed_steps or step < self.current_step

    def go_to_step(self, step: int) -> NavigationResult:
        if not self.can_go_to(step):
            return NavigationResult(False, self.current_step)
        if step != self.current_step:
            self._move_to(step)
        return NavigationResult(True, self.current_step)

    def _move_to(self, step: int) -> None:
        self.current_step = step
        if self.viewport is not None:
            self.viewport.scroll_to_top()

    # --- Submit / discard ---

    def violations(self) -> list[FieldViolation]:
        return validate_all(self.draft, self.config.validation)

    def submit(self, pipeline: SubmissionPipeline) -> SubmissionOutput:
        # The pipeline clears the stored draft; a queued autosave must not bring it back.
        if self.autosaver is not None:
            self.autosaver.flush()
        result = pipeline.submit(self.draft, self.session, self.pending_asset)
        if result.success:
            self.pending_asset = None
            if self.autosaver is not None:
                self.autosaver.cancel()
        return result

    def discard(self) -> None:
        """Throw away the stored draft and start over at step one."""
        if self.autosaver is not None:
            self.autosaver.discard(self.key)
        logger.info("Discarded draft %s", self.key)
        self.draft = self._initial.model_copy(deep=True)
        self.current_step = 1
        self.completed_steps.clear()
        self.pending_asset = None

    def _autosave(self) -> None:
        if self.autosaver is not None:
            self.autosaver.schedule(self.draft)

