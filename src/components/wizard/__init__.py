"""
Wizard component - Four-step create/edit flow for listings and posts.
"""

from ._impl import WizardController, listing_to_draft, post_to_draft
from .component import open_wizard
from .models import (
    LISTING_STEPS,
    POST_STEPS,
    NavigationResult,
    StepDefinition,
    WizardConfig,
    WizardState,
)
from .ports import ViewportPort

__all__ = [
    # Entry points
    "open_wizard",
    "WizardController",
    "listing_to_draft",
    "post_to_draft",
    # Models
    "LISTING_STEPS",
    "POST_STEPS",
    "NavigationResult",
    "StepDefinition",
    "WizardConfig",
    "WizardState",
    # Ports
    "ViewportPort",
]
