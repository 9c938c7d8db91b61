import json
import logging
import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

from src.adapters.change_feed import ChangeFeed
from src.domain.entities import BlogPost, BusinessListing, User
from src.domain.errors import PersistenceError
from src.domain.events import LISTINGS_TOPIC, POSTS_TOPIC, ChangeEvent, ChangeKind
from src.domain.query import Contains, Eq, OrderBy, Predicate

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _to_db(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.astimezone(UTC).isoformat()
    if isinstance(value, list):
        return json.dumps(value)
    return value


class _SQLiteRecordRepo(Generic[M]):
    """
    Shared select/insert/update/delete over one table mapped to one model.

    Every model field is a column. Lists are stored as JSON text and
    booleans as 0/1; pydantic coerces them back when rows are loaded.
    """

    table: str
    topic: str
    model: type[M]
    json_fields: frozenset[str] = frozenset()

    def __init__(self, db_path: str, feed: ChangeFeed | None = None):
        self.db_path = db_path
        self.feed = feed
        self._columns = list(self.model.model_fields)

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        try:
            yield conn
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("SQLite error on %s: %s", self.table, e)
            raise PersistenceError(str(e)) from e
        finally:
            conn.close()

    def _column(self, name: str) -> str:
        if name not in self._columns:
            raise ValueError(f"Unknown column {name} for {self.table}")
        return name

    def _from_row(self, row: dict[str, Any]) -> M:
        for name in self.json_fields:
            row[name] = json.loads(row[name]) if row[name] else []
        return self.model.model_validate(row)

    def _publish(self, kind: ChangeKind, record_id: UUID) -> None:
        if self.feed is not None:
            self.feed.publish(ChangeEvent(self.topic, kind, record_id))

    # --- Reads ---

    def select(
        self,
        predicates: Sequence[Predicate] = (),
        order: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> list[M]:
        clauses: list[str] = []
        params: list[Any] = []
        for predicate in predicates:
            if isinstance(predicate, Eq):
                clauses.append(f"{self._column(predicate.field)} = ?")
                params.append(_to_db(predicate.value))
            elif isinstance(predicate, Contains):
                # instr() avoids LIKE wildcard handling of user input
                options = [
                    f"instr(lower(coalesce({self._column(f)}, '')), ?) > 0"
                    for f in predicate.fields
                ]
                clauses.append("(" + " OR ".join(options) + ")")
                params.extend([predicate.text.lower()] * len(options))

        sql = f"SELECT * FROM {self.table}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if order:
            sql += " ORDER BY " + ", ".join(
                f"{self._column(o.field)} {'DESC' if o.descending else 'ASC'}" for o in order
            )
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._from_row(row) for row in rows]

    def get_by_id(self, record_id: UUID) -> M | None:
        found = self.select([Eq("id", record_id)], limit=1)
        return found[0] if found else None

    def get_by_slug(self, slug: str) -> M | None:
        found = self.select([Eq("slug", slug)], limit=1)
        return found[0] if found else None

    # --- Writes ---

    def insert(self, record: M) -> M:
        values = [_to_db(getattr(record, c)) for c in self._columns]
        placeholders = ", ".join("?" for _ in self._columns)
        with self._connection() as conn:
            conn.execute(
                f"INSERT INTO {self.table} ({', '.join(self._columns)}) VALUES ({placeholders})",
                values,
            )
            conn.commit()
        self._publish("insert", getattr(record, "id"))
        return record

    def update(self, record: M) -> M:
        columns = [c for c in self._columns if c != "id"]
        assignments = ", ".join(f"{c} = ?" for c in columns)
        values = [_to_db(getattr(record, c)) for c in columns]
        record_id = getattr(record, "id")
        with self._connection() as conn:
            cursor = conn.execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = ?",
                [*values, str(record_id)],
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise PersistenceError(f"{self.table} row {record_id} no longer exists")
        self._publish("update", record_id)
        return record

    def delete(self, record_id: UUID) -> None:
        with self._connection() as conn:
            conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (str(record_id),))
            conn.commit()
        self._publish("delete", record_id)


class SQLiteListingRepo(_SQLiteRecordRepo[BusinessListing]):
    table = "business_listings"
    topic = LISTINGS_TOPIC
    model = BusinessListing
    json_fields = frozenset({"amenities", "keywords"})
    counter_fields = frozenset({"views_count", "contact_clicks"})

    def increment(self, listing_id: UUID, column: str) -> BusinessListing | None:
        """Add one to a counter column in place; None when the row is gone."""
        if column not in self.counter_fields:
            raise ValueError(f"{column} is not a counter column")
        with self._connection() as conn:
            cursor = conn.execute(
                f"UPDATE {self.table} SET {column} = {column} + 1 WHERE id = ?",
                (str(listing_id),),
            )
            conn.commit()
            changed = cursor.rowcount
        if changed == 0:
            return None
        self._publish("update", listing_id)
        return self.get_by_id(listing_id)


class SQLitePostRepo(_SQLiteRecordRepo[BlogPost]):
    table = "blog_posts"
    topic = POSTS_TOPIC
    model = BlogPost
    json_fields = frozenset({"tags"})


class SQLiteUserRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def save(self, user: User) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, display_name, password_hash, status, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    display_name=excluded.display_name,
                    password_hash=excluded.password_hash,
                    status=excluded.status,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email.strip().lower(),
                    user.display_name,
                    user.password_hash,
                    user.status,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )

            # Roles are replaced wholesale
            conn.execute("DELETE FROM user_roles WHERE user_id = ?", (str(user.id),))
            for role in user.roles:
                conn.execute(
                    "INSERT INTO user_roles (user_id, role, created_at) VALUES (?, ?, ?)",
                    (str(user.id), role, datetime.now(UTC).isoformat()),
                )

            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(str(e)) from e
        finally:
            conn.close()

    def get_by_email(self, email: str) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM users WHERE email = ?", (email.strip().lower(),)
            ).fetchone()
            if not row:
                return None
            return self._map_row_to_user(conn, row)
        finally:
            conn.close()

    def get_by_id(self, user_id: UUID) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (str(user_id),)).fetchone()
            if not row:
                return None
            return self._map_row_to_user(conn, row)
        finally:
            conn.close()

    def list_all(self) -> list[User]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY email").fetchall()
            return [self._map_row_to_user(conn, row) for row in rows]
        finally:
            conn.close()

    def roles_for(self, user_id: UUID) -> list[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT role FROM user_roles WHERE user_id = ? ORDER BY role", (str(user_id),)
            ).fetchall()
            return [r["role"] for r in rows]
        finally:
            conn.close()

    def _map_row_to_user(self, conn: sqlite3.Connection, row: dict[str, Any]) -> User:
        roles = conn.execute(
            "SELECT role FROM user_roles WHERE user_id = ? ORDER BY role", (row["id"],)
        ).fetchall()
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            display_name=row["display_name"],
            password_hash=row["password_hash"],
            roles=[r["role"] for r in roles],
            status=row["status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
