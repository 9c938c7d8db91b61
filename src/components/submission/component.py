"""
Submission component - Turns a finished draft into a persisted record.

Shell Layer - handles I/O and error conversion. Every failure is raised
inside the pipeline as a DirectoryError and converted to a
SubmissionOutput here; the draft is only discarded after a successful
write.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from src.components.derive import DerivationConfig
from src.components.drafts import discard_draft, key_for
from src.components.listings import ensure_published_slug_free
from src.components.validation import FieldViolation, ValidationConfig, validate_all
from src.domain.drafts import ListingDraft, PostDraft
from src.domain.entities import BlogPost, BusinessListing, SessionContext
from src.domain.errors import (
    AssetUploadFailed,
    AuthRequired,
    DirectoryError,
    NotFoundError,
    ValidationError,
)

from ._impl import compose_listing, compose_post
from .models import AssetUpload, SubmissionOutput, UploadConfig
from .ports import (
    BlobStorageError,
    BlobStoragePort,
    DraftStorePort,
    ListingRepoPort,
    PostRepoPort,
    TimePort,
)

logger = logging.getLogger(__name__)


class SubmissionPipeline:
    """Upload, compose, write, then clear the draft."""

    def __init__(
        self,
        *,
        listing_repo: ListingRepoPort,
        post_repo: PostRepoPort,
        blob_storage: BlobStoragePort,
        draft_store: DraftStorePort,
        clock: TimePort,
        validation: ValidationConfig | None = None,
        derivation: DerivationConfig | None = None,
        uploads: UploadConfig | None = None,
    ) -> None:
        self.listing_repo = listing_repo
        self.post_repo = post_repo
        self.blob_storage = blob_storage
        self.draft_store = draft_store
        self.clock = clock
        self.validation = validation or ValidationConfig()
        self.derivation = derivation or DerivationConfig()
        self.uploads = uploads or UploadConfig()

    def submit(
        self,
        draft: ListingDraft | PostDraft,
        session: SessionContext | None,
        asset: AssetUpload | None = None,
    ) -> SubmissionOutput:
        if session is None:
            error = AuthRequired()
            return SubmissionOutput(
                success=False,
                notification=error.message,
                error_code=error.code,
                redirect_to_login=True,
            )

        violations = validate_all(draft, self.validation)
        if violations:
            return SubmissionOutput(
                success=False,
                notification=violations[0].message,
                error_code=ValidationError.code,
                violations=violations,
            )

        try:
            if isinstance(draft, ListingDraft):
                record, created = self._submit_listing(draft, session, asset)
            else:
                record, created = self._submit_post(draft, session, asset)
        except DirectoryError as e:
            logger.warning("Submission of %s failed: %s", key_for(draft), e)
            return self._failure(e)

        discard_draft(key_for(draft), store=self.draft_store)
        noun = "Listing" if isinstance(record, BusinessListing) else "Post"
        logger.info(
            "%s %s %s by %s", noun, record.id, "created" if created else "updated", session.user_id
        )
        return SubmissionOutput(
            success=True,
            record=record,
            created=created,
            notification=f"{noun} {'created' if created else 'updated'} successfully",
        )

    # --- Steps ---

    def _submit_listing(
        self, draft: ListingDraft, session: SessionContext, asset: AssetUpload | None
    ) -> tuple[BusinessListing, bool]:
        existing = None
        if draft.entity_id is not None:
            existing = self.listing_repo.get_by_id(draft.entity_id)
            if existing is None:
                raise NotFoundError("Listing", draft.entity_id)
            if existing.user_id != session.user_id and not session.is_admin:
                raise AuthRequired("You can only edit your own listings")

        def compose(image_url: str | None) -> BusinessListing:
            return compose_listing(
                draft,
                owner_id=session.user_id,
                image_url=image_url,
                existing=existing,
                now=self.clock.now_utc(),
                config=self.derivation,
            )

        # Slug clashes are known before anything is uploaded.
        record = compose(draft.featured_image_url or None)
        if record.is_published:
            ensure_published_slug_free(record.slug, record.id, repo=self.listing_repo)
        if asset is not None:
            record = compose(self._resolve_image(draft, asset, self.uploads.listing_bucket))

        if existing is None:
            return self.listing_repo.insert(record), True
        return self.listing_repo.update(record), False

    def _submit_post(
        self, draft: PostDraft, session: SessionContext, asset: AssetUpload | None
    ) -> tuple[BlogPost, bool]:
        if not session.is_admin:
            raise AuthRequired("Only admins can publish blog posts")

        existing = None
        if draft.entity_id is not None:
            existing = self.post_repo.get_by_id(draft.entity_id)
            if existing is None:
                raise NotFoundError("Post", draft.entity_id)

        def compose(image_url: str | None) -> BlogPost:
            return compose_post(
                draft,
                author_id=existing.author_id if existing else session.user_id,
                image_url=image_url,
                existing=existing,
                now=self.clock.now_utc(),
                config=self.derivation,
            )

        record = compose(draft.featured_image_url or None)
        clash = self.post_repo.get_by_slug(record.slug)
        if clash is not None and clash.id != record.id:
            raise ValidationError("slug", "A post already uses this slug")
        if asset is not None:
            record = compose(self._resolve_image(draft, asset, self.uploads.post_bucket))

        if existing is None:
            return self.post_repo.insert(record), True
        return self.post_repo.update(record), False

    def _resolve_image(
        self, draft: ListingDraft | PostDraft, asset: AssetUpload | None, bucket: str
    ) -> str | None:
        """Upload a pending image, otherwise keep the draft's current URL."""
        if asset is None:
            return draft.featured_image_url or None
        self.uploads.check(asset.content_type, asset.size)

        stamp = int(self.clock.now_utc().timestamp() * 1000)
        path = f"{uuid4().hex}-{stamp}.{asset.extension}"
        try:
            stored = self.blob_storage.upload(bucket, path, asset.data, asset.content_type)
        except BlobStorageError as e:
            raise AssetUploadFailed(str(e)) from e
        return self.blob_storage.get_public_url(bucket, stored)

    @staticmethod
    def _failure(error: DirectoryError) -> SubmissionOutput:
        violations: list[FieldViolation] = []
        if isinstance(error, ValidationError):
            violations.append(FieldViolation(error.field, error.message, error.code))
            message = error.message
        else:
            message = str(error)
        return SubmissionOutput(
            success=False,
            notification=message,
            error_code=error.code,
            violations=violations,
        )
