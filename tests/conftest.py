from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api import deps
from src.domain.entities import User
from src.rules.loader import load_rules
from src.rules.models import Rules

PASSWORD = "correct-horse-battery"

LISTING_FIELDS: dict[str, Any] = {
    "category": "restaurants",
    "title": "Kolachi Restaurant",
    "description": "Seafood restaurant on the Do Darya waterfront in Karachi, open late.",
    "address": "Do Darya, Phase 8, DHA",
    "city": "Karachi",
    "phone": "+92 300 1234567",
    "email": "info@kolachi.pk",
    "website": "https://kolachi.pk",
    "price_range": "$$$",
}


@pytest.fixture
def rules() -> Rules:
    # Tests run from the project root
    return load_rules(Path("rules.yaml").resolve())


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    path = str(tmp_path / "site.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    directory = tmp_path / "data"
    monkeypatch.setenv("SITE_DATA_DIR", str(directory))
    deps.reset_singletons()
    return directory


@pytest.fixture
def client(data_dir: Path) -> Iterator[TestClient]:
    """TestClient over a fresh data directory; startup applies migrations."""
    from src.api.main import app

    with TestClient(app) as test_client:
        yield test_client
    deps.reset_singletons()


def _create_user(db: str, email: str, roles: list[str]) -> User:
    user = User(
        email=email,
        display_name=email.split("@")[0].title(),
        password_hash=JWTAuthAdapter().hash_password(PASSWORD),
        roles=roles,
    )
    SQLiteUserRepo(db).save(user)
    return user


@pytest.fixture
def admin_user(client: TestClient, data_dir: Path) -> User:
    return _create_user(str(data_dir / "site.db"), "admin@example.com", ["admin"])


@pytest.fixture
def member_user(client: TestClient, data_dir: Path) -> User:
    return _create_user(str(data_dir / "site.db"), "owner@example.com", ["member"])


def bearer(user: User) -> dict[str, str]:
    token = JWTAuthAdapter().create_token(user.id, 60)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return bearer(admin_user)


@pytest.fixture
def member_headers(member_user: User) -> dict[str, str]:
    return bearer(member_user)


@pytest.fixture
def listing_fields() -> dict[str, Any]:
    """Field values that pass every listing wizard step."""
    return dict(LISTING_FIELDS)


@pytest.fixture
def user_password() -> str:
    return PASSWORD


@pytest.fixture
def other_member_headers(client: TestClient, data_dir: Path) -> dict[str, str]:
    return bearer(_create_user(str(data_dir / "site.db"), "rival@example.com", ["member"]))
