import argparse
import logging
import os
import sys
from pathlib import Path

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteActivityRepo, SQLiteAdminRepo
from src.components.admin import CleanupInput, run_cleanup_activities
from src.components.bootstrap import BootstrapInput, run_bootstrap
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger("cli")

DATA_DIR = os.environ.get("EINFO_DATA_DIR", "./data")
RULES_PATH = os.environ.get("EINFO_RULES_PATH", "rules.yaml")
MIGRATIONS_DIR = "migrations"


def db_path(data_dir: str) -> str:
    return str(Path(data_dir) / "einfo.db")


def get_rules(rules_path: str) -> Rules:
    if not Path(rules_path).exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)
    return load_rules(Path(rules_path))


def handle_migrate(args: argparse.Namespace, rules: Rules) -> int:
    Path(args.data_dir).mkdir(parents=True, exist_ok=True)
    retries = args.retries if args.retries is not None else rules.ops.migrations.retries
    delay = args.delay if args.delay is not None else rules.ops.migrations.delay_seconds

    migrator = SQLiteMigrator(db_path(args.data_dir), args.migrations_dir)
    applied = migrator.run_with_retries(retries=retries, delay_seconds=delay)
    print(f"Applied {len(applied)} migration(s).")
    return 0


def handle_create_super_admin(args: argparse.Namespace, rules: Rules) -> int:
    inp = BootstrapInput(
        email=os.environ.get("SUPER_ADMIN_EMAIL"),
        username=os.environ.get("SUPER_ADMIN_USERNAME"),
        name=os.environ.get("SUPER_ADMIN_NAME"),
        password=os.environ.get("SUPER_ADMIN_PASSWORD"),
        environment=os.environ.get("EINFO_ENV", "development"),
    )
    path = db_path(args.data_dir)
    result = run_bootstrap(
        inp,
        admin_repo=SQLiteAdminRepo(path),
        activity_repo=SQLiteActivityRepo(path),
        auth_adapter=JWTAuthAdapter(),
        admin_rules=rules.admin,
        auth_rules=rules.auth,
        time=SystemClock(),
    )

    if not result.success:
        for err in result.errors:
            logger.error("%s: %s", err.code, err.message)
        return 1

    if result.skipped_reason:
        print(f"Skipped: {result.skipped_reason}.")
        return 0

    assert result.admin is not None
    print(f"Super admin created: {result.admin.username} <{result.admin.email}>")
    if result.used_default_password:
        logger.warning("Default password in use; change it after first login.")
    return 0


def handle_cleanup_activities(args: argparse.Namespace, rules: Rules) -> int:
    keep = args.keep if args.keep is not None else rules.admin.activity_log_retention
    result = run_cleanup_activities(
        CleanupInput(keep=keep), SQLiteActivityRepo(db_path(args.data_dir))
    )
    print(
        f"Activity log: {result.before} before, {result.deleted} deleted, "
        f"{result.after} remaining (keep={result.kept})."
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="e-info.me operations CLI")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory holding einfo.db")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    parser.add_argument("--migrations-dir", default=MIGRATIONS_DIR)
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply pending SQL migrations")
    migrate_parser.add_argument("--retries", type=int, help="Retries on a locked database")
    migrate_parser.add_argument("--delay", type=float, help="Seconds between retries")

    # create-super-admin
    subparsers.add_parser(
        "create-super-admin",
        help="Create the first super admin from SUPER_ADMIN_* environment variables",
    )

    # cleanup-activities
    cleanup_parser = subparsers.add_parser(
        "cleanup-activities", help="Keep only the most recent admin activity entries"
    )
    cleanup_parser.add_argument("--keep", type=int, help="Entries to keep")

    return parser


HANDLERS = {
    "migrate": handle_migrate,
    "create-super-admin": handle_create_super_admin,
    "cleanup-activities": handle_cleanup_activities,
}


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)
    rules = get_rules(args.rules)
    return HANDLERS[args.command](args, rules)


if __name__ == "__main__":
    sys.exit(main())
