import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.sessions import TokenSessionProvider
from src.adapters.blob_store import LocalBlobStorage
from src.adapters.change_feed import ChangeFeed
from src.adapters.clock import SystemClock
from src.adapters.draft_store import JsonFileDraftStore
from src.adapters.query_cache import InMemoryQueryCache
from src.adapters.sqlite.repos import SQLiteListingRepo, SQLitePostRepo, SQLiteUserRepo
from src.api.wizard_registry import WizardRegistry
from src.components.blog import LivePostList
from src.components.derive import DerivationConfig
from src.components.submission import SubmissionPipeline, UploadConfig
from src.components.validation import ValidationConfig
from src.components.wizard import WizardConfig
from src.domain.entities import SessionContext
from src.domain.policy import PolicyEngine
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(data_dir or os.environ.get("SITE_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "site.db")
        self.blobs_dir = self.data_dir / "storage"
        self.drafts_dir = self.data_dir / "drafts"
        self.rules_path = Path(os.environ.get("SITE_RULES_PATH", self.base_dir / "rules.yaml"))
        self.public_base_url = os.environ.get("SITE_PUBLIC_BASE_URL", "/storage")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


def get_policy(rules: Rules = Depends(get_rules)) -> PolicyEngine:
    return PolicyEngine(rules)


# --- Process-wide singletons ---
_feed_instance: ChangeFeed | None = None
_cache_instance: InMemoryQueryCache | None = None
_live_posts_instance: LivePostList | None = None
_wizards_instance: WizardRegistry | None = None
_clock_instance: SystemClock | None = None


def get_change_feed() -> ChangeFeed:
    """Get change feed singleton; every repo publishes to it."""
    global _feed_instance
    if _feed_instance is None:
        _feed_instance = ChangeFeed()
    return _feed_instance


def get_query_cache(feed: ChangeFeed = Depends(get_change_feed)) -> InMemoryQueryCache:
    """Get query cache singleton, invalidated by listing change events."""
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = InMemoryQueryCache()
        _cache_instance.attach(feed)
    return _cache_instance


def get_clock() -> SystemClock:
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


def get_wizard_registry(rules: Rules = Depends(get_rules)) -> WizardRegistry:
    global _wizards_instance
    if _wizards_instance is None:
        _wizards_instance = WizardRegistry(
            clock=get_clock(), idle_seconds=rules.drafts.idle_minutes * 60
        )
    return _wizards_instance


def reset_singletons() -> None:
    """Forget process-wide state; used between test apps."""
    global _feed_instance, _cache_instance, _live_posts_instance, _wizards_instance
    if _live_posts_instance is not None:
        _live_posts_instance.close()
    _feed_instance = None
    _cache_instance = None
    _live_posts_instance = None
    _wizards_instance = None
    get_settings.cache_clear()
    _load_rules_cached.cache_clear()


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_listing_repo(
    settings: Settings = Depends(get_settings),
    feed: ChangeFeed = Depends(get_change_feed),
) -> SQLiteListingRepo:
    return SQLiteListingRepo(settings.db_path, feed)


def get_post_repo(
    settings: Settings = Depends(get_settings),
    feed: ChangeFeed = Depends(get_change_feed),
) -> SQLitePostRepo:
    return SQLitePostRepo(settings.db_path, feed)


def get_live_posts(
    repo: SQLitePostRepo = Depends(get_post_repo),
    feed: ChangeFeed = Depends(get_change_feed),
) -> LivePostList:
    """Admin post list singleton, reloaded on every post change."""
    global _live_posts_instance
    if _live_posts_instance is None:
        _live_posts_instance = LivePostList(repo, feed)
    return _live_posts_instance


def get_blob_storage(settings: Settings = Depends(get_settings)) -> LocalBlobStorage:
    return LocalBlobStorage(settings.blobs_dir, public_base_url=settings.public_base_url)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_auth_adapter() -> JWTAuthAdapter:
    return JWTAuthAdapter()


async def get_optional_session(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
) -> SessionContext | None:
    # Cookie first (HttpOnly), then the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ")[1]

    return TokenSessionProvider(auth, user_repo).resolve(token)


async def get_session(
    session: SessionContext | None = Depends(get_optional_session),
) -> SessionContext:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def require_admin(
    session: SessionContext = Depends(get_session),
    policy: PolicyEngine = Depends(get_policy),
) -> SessionContext:
    if not policy.check_permission(session, "admin:access"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return session


# --- Component configuration ---
def get_wizard_config(rules: Rules = Depends(get_rules)) -> WizardConfig:
    return WizardConfig(
        validation=ValidationConfig.from_rules(rules.validation),
        derivation=DerivationConfig.from_rules(rules.derivation),
    )


def get_draft_store(
    session: SessionContext = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> JsonFileDraftStore:
    """Drafts are kept per signed-in user."""
    return JsonFileDraftStore(settings.drafts_dir / str(session.user_id))


def get_upload_config(rules: Rules = Depends(get_rules)) -> UploadConfig:
    return UploadConfig.from_rules(rules.uploads)


def get_submission_pipeline(
    rules: Rules = Depends(get_rules),
    listing_repo: SQLiteListingRepo = Depends(get_listing_repo),
    post_repo: SQLitePostRepo = Depends(get_post_repo),
    blob_storage: LocalBlobStorage = Depends(get_blob_storage),
    draft_store: JsonFileDraftStore = Depends(get_draft_store),
    clock: SystemClock = Depends(get_clock),
    uploads: UploadConfig = Depends(get_upload_config),
) -> SubmissionPipeline:
    return SubmissionPipeline(
        listing_repo=listing_repo,
        post_repo=post_repo,
        blob_storage=blob_storage,
        draft_store=draft_store,
        clock=clock,
        validation=ValidationConfig.from_rules(rules.validation),
        derivation=DerivationConfig.from_rules(rules.derivation),
        uploads=uploads,
    )
