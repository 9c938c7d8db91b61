"""
Wizard component - Opening a listing or post wizard.

Shell Layer - resolves which draft a wizard starts from: a saved draft
for the same key wins, then the stored entity being edited, then a blank
draft.
"""

from __future__ import annotations

import logging

from src.components.drafts import DraftAutosaver, load_draft
from src.components.drafts.ports import DraftStorePort
from src.domain.drafts import (
    DraftKind,
    ListingDraft,
    PostDraft,
    draft_key,
    new_listing_draft,
    new_post_draft,
)
from src.domain.entities import BlogPost, BusinessListing, SessionContext

from ._impl import WizardController, listing_to_draft, post_to_draft
from .models import WizardConfig
from .ports import ViewportPort

logger = logging.getLogger(__name__)


def open_wizard(
    kind: DraftKind,
    *,
    store: DraftStorePort,
    autosaver: DraftAutosaver | None = None,
    session: SessionContext | None = None,
    entity: BusinessListing | BlogPost | None = None,
    config: WizardConfig | None = None,
    viewport: ViewportPort | None = None,
) -> WizardController:
    initial: ListingDraft | PostDraft
    if entity is None:
        initial = new_listing_draft() if kind == "listing" else new_post_draft()
    elif isinstance(entity, BusinessListing):
        initial = listing_to_draft(entity)
    else:
        initial = post_to_draft(entity)
    if initial.kind != kind:
        raise ValueError(f"Cannot open a {kind} wizard for a {initial.kind}")

    key = draft_key(kind, entity.id if entity else None)
    saved = load_draft(key, store=store)
    if saved is not None and saved.kind == kind:
        logger.info("Resuming saved draft %s", key)
        draft = saved
    else:
        draft = initial.model_copy(deep=True)

    return WizardController(
        draft,
        session=session,
        config=config,
        autosaver=autosaver,
        viewport=viewport,
        initial=initial,
    )
