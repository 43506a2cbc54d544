"""CLI for database migrations and maintenance."""
import argparse
from pathlib import Path

from tipsplit.core.config import get_settings

BACKEND_DIR = Path(__file__).resolve().parents[1]


def _alembic_config():
    from alembic.config import Config

    cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return cfg


def cmd_migrate(args):
    """Run alembic upgrade head."""
    from alembic import command

    print("Applying Alembic migrations...")
    command.upgrade(_alembic_config(), "head")
    print("Database is up to date")
    return 0


def cmd_stamp(args):
    """Stamp alembic revision without running migrations."""
    from alembic import command

    command.stamp(_alembic_config(), args.revision or "head")
    print(f"Stamped revision {args.revision or 'head'}")
    return 0


def cmd_init_db(args):
    """Create tables straight from the model metadata."""
    from tipsplit.core.database import init_db

    init_db()
    print("Tables created")
    return 0


def cmd_stats(args):
    """Print aggregate statistics."""
    from tipsplit.core.database import get_session_local
    from tipsplit.core.templates import format_money
    from tipsplit.services.calculation_service import CalculationService

    db = get_session_local()()
    try:
        stats = CalculationService(db).aggregate()
    finally:
        db.close()

    print(f"Total calculations:     {stats.total_calculations}")
    print(f"Average tip percentage: {stats.average_tip_percentage}%")
    print(f"Average bill amount:    {format_money(stats.average_bill_amount)}")
    print(f"Total tips collected:   {format_money(stats.total_tips_collected)}")
    print(f"Average party size:     {stats.average_party_size}")
    return 0


def cmd_clear(args):
    """Delete every stored calculation."""
    if not args.yes:
        print("Refusing to clear calculations without --yes")
        return 1

    from tipsplit.core.database import get_session_local
    from tipsplit.services.calculation_service import CalculationService

    db = get_session_local()()
    try:
        deleted = CalculationService(db).clear()
    finally:
        db.close()
    print(f"Deleted {deleted} calculations")
    return 0


def cmd_serve(args):
    """Run the web app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "tipsplit.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
    )
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="tipsplit")
    sub = p.add_subparsers(dest="cmd")
    s = sub.add_parser("migrate", help="Run migrations (upgrade head)")
    s.set_defaults(func=cmd_migrate)
    s = sub.add_parser("stamp", help="Stamp alembic to a revision")
    s.add_argument("--revision", "-r", help="Revision to stamp", default="head")
    s.set_defaults(func=cmd_stamp)
    s = sub.add_parser("init-db", help="Create tables from the models")
    s.set_defaults(func=cmd_init_db)
    s = sub.add_parser("stats", help="Print aggregate statistics")
    s.set_defaults(func=cmd_stats)
    s = sub.add_parser("clear", help="Delete all stored calculations")
    s.add_argument("--yes", action="store_true", help="Confirm the deletion")
    s.set_defaults(func=cmd_clear)
    s = sub.add_parser("serve", help="Run the web server")
    s.add_argument("--host", default=None)
    s.add_argument("--port", type=int, default=None)
    s.add_argument("--reload", action="store_true")
    s.set_defaults(func=cmd_serve)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
