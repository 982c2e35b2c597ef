"""
CLI commands for the audit log

Provides administrative commands for:
- Creating the history tables
- Logging an event from the command line (attributed to the CLI)
- Showing what has been logged
"""

import json
import sys
import logging
import click
from sqlalchemy import func, select

from auditlog.core.runtime import command_line

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _database_url(ctx: click.Context) -> str:
    from config.settings import Config

    return ctx.obj.get("database_url") or Config.DATABASE_URL or f"sqlite:///{Config.DATABASE_PATH()}"


@click.group()
@click.option("--database-url", envvar="DATABASE_URL", default=None, help="SQLAlchemy database URL")
@click.pass_context
def cli(ctx: click.Context, database_url: str | None) -> None:
    """Audit Log CLI - Administrative commands"""
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url


@cli.command()
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """
    Initialize the database with the history tables

    Safe to run repeatedly, existing tables are left alone.
    """
    try:
        from auditlog.db import DatabaseManager

        click.echo("Initializing database...")
        db_manager = DatabaseManager(_database_url(ctx))
        try:
            db_manager.init_db()
            missing = db_manager.missing_tables()
            if missing:
                click.echo(f"Error: tables still missing: {', '.join(missing)}", err=True)
                sys.exit(1)
            click.echo("✓ Tables created")
            click.echo(f"Database: {db_manager.display_url}")
        finally:
            db_manager.close()

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        logger.exception("Database initialization failed")
        sys.exit(1)


@cli.command()
@click.option("--producer", "producer_slug", default="HistoryLogger", show_default=True,
              help="Slug of the producer the event is logged for")
@click.option("--level", default="info", show_default=True, help="Event level")
@click.option("--message", default=None, help="Literal message")
@click.option("--message-key", default=None, help="Key of a message declared by the producer")
@click.option("--context", "context_json", default="{}", help="Context as a JSON object")
@click.pass_context
def log(ctx: click.Context, producer_slug: str, level: str, message: str | None,
        message_key: str | None, context_json: str) -> None:
    """
    Log one event

    The event is attributed to the command-line tool unless the context
    carries an _initiator.
    """
    if not message and not message_key:
        click.echo("Error: --message or --message-key is required", err=True)
        sys.exit(2)

    try:
        context = json.loads(context_json)
    except json.JSONDecodeError as e:
        click.echo(f"Error: --context is not valid JSON: {e}", err=True)
        sys.exit(2)
    if not isinstance(context, dict):
        click.echo("Error: --context must be a JSON object", err=True)
        sys.exit(2)

    try:
        from auditlog.db import DatabaseManager
        from auditlog.history import init_history

        db_manager = DatabaseManager(_database_url(ctx))
        db_manager.init_db()
        engine = init_history(db_manager)

        producer = engine.get_producer(producer_slug)
        if producer is None:
            click.echo(f"Error: unknown producer '{producer_slug}'", err=True)
            click.echo(f"Known producers: {', '.join(sorted(engine.producers))}", err=True)
            sys.exit(1)

        with command_line():
            if message_key:
                event_id = producer.log_by_key(level, message_key, context)
            else:
                event_id = producer.log(level, message, context)

        if event_id is None:
            click.echo("Event was not logged", err=True)
            sys.exit(1)
        click.echo(f"✓ Logged event {event_id}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        logger.exception("Logging from the command line failed")
        sys.exit(1)


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """
    Show the number of logged events per producer and level
    """
    try:
        from auditlog.db import DatabaseManager
        from auditlog.models import HistoryEvent

        db_manager = DatabaseManager(_database_url(ctx))
        session = db_manager.get_session()

        try:
            rows = session.execute(
                select(HistoryEvent.logger, HistoryEvent.level, func.count(HistoryEvent.id))
                .group_by(HistoryEvent.logger, HistoryEvent.level)
                .order_by(HistoryEvent.logger, HistoryEvent.level)
            ).all()

            if not rows:
                click.echo("No events logged.")
                return

            click.echo("\n" + "=" * 60)
            click.echo("Logged events")
            click.echo("=" * 60)

            for producer_slug, level, count in rows:
                click.echo(f"{producer_slug} | {level} | {count}")

            click.echo("=" * 60)
            click.echo(f"Total: {sum(count for _, _, count in rows)}\n")

        finally:
            session.close()
            db_manager.close()

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        logger.exception("Stats failed")
        sys.exit(1)


if __name__ == "__main__":
    cli()
