"""
Wizard component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.components.derive import DerivationConfig
from src.components.validation import FieldViolation, ValidationConfig
from src.domain.drafts import ListingDraft, PostDraft


@dataclass(frozen=True)
class StepDefinition:
    number: int
    title: str
    description: str = ""


LISTING_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition(1, "Category & Title", "What kind of business is this?"),
    StepDefinition(2, "Details & Location", "Describe it and tell people where to find it"),
    StepDefinition(3, "Media & Contact", "Add a photo, pricing and amenities"),
    StepDefinition(4, "Preview & Publish", "Check everything before submitting"),
)

POST_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition(1, "Basics", "Title, slug and category"),
    StepDefinition(2, "Content", "Write the article"),
    StepDefinition(3, "Media & SEO", "Featured image, tags and meta description"),
    StepDefinition(4, "Preview & Publish", "Check everything before publishing"),
)


@dataclass(frozen=True)
class WizardConfig:
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    derivation: DerivationConfig = field(default_factory=DerivationConfig)


@dataclass(frozen=True)
class NavigationResult:
    """Outcome of a step transition."""

    success: bool
    current_step: int
    violations: list[FieldViolation] = field(default_factory=list)

    @property
    def notification(self) -> str:
        """First violation message, shown to the user as a toast."""
        return self.violations[0].message if self.violations else ""


@dataclass(frozen=True)
class WizardState:
    """Read-only snapshot of a wizard for rendering."""

    key: str
    current_step: int
    completed_steps: tuple[int, ...]
    steps: tuple[StepDefinition, ...]
    draft: ListingDraft | PostDraft
    pending_asset: str | None = None
