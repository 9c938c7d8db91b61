import argparse
import logging
import sys
from getpass import getpass
from pathlib import Path

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import Settings
from src.domain.entities import ADMIN_ROLE, User
from src.domain.errors import PersistenceError
from src.rules.loader import load_rules

logger = logging.getLogger("cli")


def handle_init_db(settings: Settings, args: argparse.Namespace) -> int:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path).run_migrations()
    if applied:
        print(f"Applied {len(applied)} migration(s) to {settings.db_path}:")
        for name in applied:
            print(f" - {name}")
    else:
        print(f"{settings.db_path} is up to date.")
    return 0


def handle_create_admin(settings: Settings, args: argparse.Namespace) -> int:
    rules = load_rules(settings.rules_path)
    password = args.password or getpass("Password: ")
    if len(password) < rules.auth.password_min_length:
        logger.error("Password must be at least %d characters", rules.auth.password_min_length)
        return 1

    repo = SQLiteUserRepo(settings.db_path)
    existing = repo.get_by_email(args.email)
    if existing is not None and not args.update:
        logger.error("User %s already exists (use --update to reset it)", args.email)
        return 1

    auth = JWTAuthAdapter()
    user = existing or User(
        email=args.email, display_name=args.display_name or args.email, password_hash=""
    )
    user.password_hash = auth.hash_password(password)
    if ADMIN_ROLE not in user.roles:
        user.roles = [*user.roles, ADMIN_ROLE]
    user.status = "active"

    try:
        repo.save(user)
    except PersistenceError as e:
        logger.error("Could not save admin: %s (did you run init-db?)", e)
        return 1
    print(f"Admin {user.email} ready ({user.id}).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Local SEO directory CLI")
    parser.add_argument("--data-dir", type=Path, help="Data directory (default: $SITE_DATA_DIR)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create or upgrade the database")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("email")
    admin_parser.add_argument("--password", help="Prompted for when omitted")
    admin_parser.add_argument("--display-name")
    admin_parser.add_argument(
        "--update", action="store_true", help="Reset the password of an existing user"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    settings = Settings(data_dir=args.data_dir)

    if args.command == "init-db":
        return handle_init_db(settings, args)
    return handle_create_admin(settings, args)


if __name__ == "__main__":
    sys.exit(main())
