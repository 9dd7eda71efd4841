import argparse
import logging
import os
import sys
from pathlib import Path

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.app_shell.context import ServiceContext
from src.components.subscription import (
    IntegrationError,
    SubscribeInput,
    UnsubscribeInput,
    resolve_message,
    run,
)
from src.rules.loader import load_rules

logger = logging.getLogger("cli")

DATA_DIR = os.environ.get("NEWSLETTER_DATA_DIR", "data")
DB_PATH = str(Path(DATA_DIR) / "newsletter.db")
RULES_PATH = os.environ.get("NEWSLETTER_RULES_PATH", "rules.yaml")
MIGRATIONS_DIR = "migrations"


def get_context(db_path: str = DB_PATH, rules_path: str = RULES_PATH) -> ServiceContext:
    if not Path(rules_path).exists():
        logger.error(f"Rules file {rules_path} not found.")
        sys.exit(1)

    rules = load_rules(Path(rules_path))
    return ServiceContext.create(db_path, rules, base_dir=Path.cwd())


def handle_migrate(args: argparse.Namespace) -> int:
    Path(args.db).parent.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(args.db, args.migrations).run_migrations()
    print(f"Applied {len(applied)} migration(s).")
    return 0


def _report(ctx: ServiceContext, message_key: str) -> None:
    flash = resolve_message(message_key, ctx.catalog)
    print(flash.text if flash else message_key)


def handle_subscribe(ctx: ServiceContext, args: argparse.Namespace) -> int:
    inp = SubscribeInput(
        email=args.email,
        first_name=args.first_name,
        last_name=args.last_name,
        wants_html_mail=args.html,
        context_storage_pid=args.storage_pid,
    )
    outcome = run(inp, store=ctx.store, config=ctx.config)
    _report(ctx, outcome.message_key)
    return 0


def handle_unsubscribe(ctx: ServiceContext, args: argparse.Namespace) -> int:
    outcome = run(
        UnsubscribeInput(email=args.email),
        store=ctx.store,
        notifier=ctx.notifier,
        config=ctx.config,
    )
    _report(ctx, outcome.message_key)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Newsletter subscription CLI")
    parser.add_argument("--db", default=DB_PATH, help="SQLite database path")
    parser.add_argument("--rules", default=RULES_PATH, help="Rules file path")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    migrate_parser = subparsers.add_parser("migrate", help="Apply database migrations")
    migrate_parser.add_argument("--migrations", default=MIGRATIONS_DIR)

    # subscribe
    sub_parser = subparsers.add_parser("subscribe", help="Subscribe an email address")
    sub_parser.add_argument("email")
    sub_parser.add_argument("--first-name", default="")
    sub_parser.add_argument("--last-name", default="")
    sub_parser.add_argument("--html", action="store_true", help="Prefer HTML newsletters")
    sub_parser.add_argument("--storage-pid", type=int, default=None)

    # unsubscribe
    unsub_parser = subparsers.add_parser("unsubscribe", help="Unsubscribe an email address")
    unsub_parser.add_argument("email")

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    if args.command == "migrate":
        return handle_migrate(args)

    ctx = get_context(args.db, args.rules)
    try:
        if args.command == "subscribe":
            return handle_subscribe(ctx, args)
        return handle_unsubscribe(ctx, args)
    except IntegrationError:
        logger.exception("Command %s failed", args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
