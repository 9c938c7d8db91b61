from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import ApprovalStatus, BusinessListing
from src.domain.errors import InvalidTransitionError, ValidationError

# Approve is allowed from any status (including re-approval of a rejected
# listing). Reject is only reachable from pending.
TRANSITIONS: dict[ApprovalStatus, list[ApprovalStatus]] = {
    "pending": ["approved", "rejected"],
    "rejected": ["approved"],
    "approved": ["approved"],
}


def can_transition(current: ApprovalStatus, new: ApprovalStatus) -> bool:
    """
    Determine if a moderation transition is allowed.
    """
    return new in TRANSITIONS.get(current, [])


def allowed_actions(current: ApprovalStatus) -> list[str]:
    """Actions an admin console should offer for a listing in this status."""
    actions = []
    if can_transition(current, "approved") and current != "approved":
        actions.append("approve")
    if can_transition(current, "rejected"):
        actions.append("reject")
    return actions


def approve(listing: BusinessListing, approver_id: UUID, now: datetime) -> BusinessListing:
    """
    Return a NEW listing marked approved.
    Clears any rejection reason and records who approved it and when.
    """
    if not can_transition(listing.approval_status, "approved"):
        raise InvalidTransitionError(listing.approval_status, "approved")

    updates: dict[str, Any] = {
        "approval_status": "approved",
        "rejection_reason": None,
        "approved_by": approver_id,
        "approved_at": now,
        "updated_at": now,
    }
    return listing.model_copy(update=updates)


def reject(
    listing: BusinessListing, reason: str, approver_id: UUID, now: datetime
) -> BusinessListing:
    """
    Return a NEW listing marked rejected.
    Raises ValidationError for a blank reason, InvalidTransitionError unless pending.
    """
    if not reason or not reason.strip():
        raise ValidationError("rejection_reason", "Please provide a reason for rejection")

    if not can_transition(listing.approval_status, "rejected"):
        raise InvalidTransitionError(listing.approval_status, "rejected")

    updates: dict[str, Any] = {
        "approval_status": "rejected",
        "rejection_reason": reason.strip(),
        "approved_by": approver_id,
        "approved_at": now,
        "updated_at": now,
    }
    return listing.model_copy(update=updates)
