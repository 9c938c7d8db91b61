"""
Open wizards, kept between requests.

Each HTTP request is one user action on a wizard; the controller and its
debounced autosaver live here, keyed by user and draft key, until the
wizard is submitted, discarded or left idle for too long. An evicted
wizard's pending edits are flushed first, so starting it again resumes
from the saved draft.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from src.adapters.clock import SystemClock
from src.components.drafts import DraftAutosaver
from src.components.drafts.ports import DraftStorePort, TimePort
from src.components.wizard import WizardConfig, WizardController, open_wizard
from src.domain.drafts import DraftKind, draft_key
from src.domain.entities import BlogPost, BusinessListing, SessionContext

logger = logging.getLogger(__name__)

DEFAULT_IDLE_SECONDS = 60 * 60


@dataclass
class _OpenWizard:
    controller: WizardController
    touched_at: datetime


class WizardRegistry:
    def __init__(
        self, clock: TimePort | None = None, idle_seconds: float = DEFAULT_IDLE_SECONDS
    ) -> None:
        self.clock = clock or SystemClock()
        self.idle = timedelta(seconds=idle_seconds)
        self._open: dict[tuple[UUID, str], _OpenWizard] = {}
        self._lock = threading.Lock()

    def open(
        self,
        kind: DraftKind,
        session: SessionContext,
        *,
        store: DraftStorePort,
        clock: TimePort,
        config: WizardConfig,
        debounce_seconds: float,
        entity: BusinessListing | BlogPost | None = None,
    ) -> WizardController:
        """Start a wizard, or return the one this user already has open for the key."""
        existing = self.get(session, draft_key(kind, entity.id if entity else None))
        if existing is not None:
            return existing

        autosaver = DraftAutosaver(store, clock, debounce_seconds)
        controller = open_wizard(
            kind,
            store=store,
            autosaver=autosaver,
            session=session,
            entity=entity,
            config=config,
        )
        with self._lock:
            self._open[(session.user_id, controller.key)] = _OpenWizard(
                controller, self.clock.now_utc()
            )
        logger.info("Opened wizard %s for %s", controller.key, session.user_id)
        return controller

    def get(self, session: SessionContext, key: str) -> WizardController | None:
        self.evict_idle()
        with self._lock:
            entry = self._open.get((session.user_id, key))
            if entry is None:
                return None
            entry.touched_at = self.clock.now_utc()
            return entry.controller

    def close(self, session: SessionContext, key: str) -> None:
        with self._lock:
            self._open.pop((session.user_id, key), None)

    def evict_idle(self) -> int:
        """Drop wizards untouched for longer than the idle window."""
        cutoff = self.clock.now_utc() - self.idle
        with self._lock:
            stale = [k for k, entry in self._open.items() if entry.touched_at < cutoff]
            evicted = [self._open.pop(k).controller for k in stale]

        for controller in evicted:
            if controller.autosaver is not None:
                controller.autosaver.flush()
            logger.info("Evicted idle wizard %s", controller.key)
        return len(evicted)

    def __len__(self) -> int:
        return len(self._open)
