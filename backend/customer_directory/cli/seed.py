"""``flask seed`` commands loading demo customers for local development."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from customer_directory.core.extensions import db, get_auth_settings
from customer_directory.infra.security.password_hasher import WerkzeugPasswordHasher
from customer_directory.seeds import seed_data
from customer_directory.services.customers import CustomerService

LOGGER = logging.getLogger(__name__)

Summary = dict[str, dict[str, int]]


def _customer_service() -> CustomerService:
    settings = get_auth_settings(current_app)
    return CustomerService(hasher=WerkzeugPasswordHasher.from_settings(settings))


def _print_summary(summary: Summary) -> None:
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(map(len, summary))
    for table in sorted(summary):
        counts = summary[table]
        click.echo(
            f"  {table.ljust(width)}  created={counts.get('created', 0):>2}"
            f"  existing={counts.get('existing', 0):>2}"
        )


def _seed(verbose: bool) -> Summary:
    """Run every seeder, turning database failures into a CLI error."""
    try:
        return seed_data.run_all(_customer_service(), verbose=verbose)
    except SQLAlchemyError as exc:  # pragma: no cover - CLI safeguard
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Log every skipped record.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Load demo data into the configured database."""
    ctx.ensure_object(dict)["verbose"] = verbose
    level = logging.DEBUG if verbose else logging.INFO
    for name in (seed_data.__name__, __name__):
        logging.getLogger(name).setLevel(level)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Insert demo customers; existing usernames or emails are skipped."""
    _print_summary(_seed(bool(ctx.obj.get("verbose"))))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Do not ask before dropping tables.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Recreate the schema from scratch, then seed. Refused in production."""
    if str(current_app.config.get("ENVIRONMENT", "production")).lower() == "production":
        raise click.UsageError("'flask seed fresh' is disabled in production.")
    if not yes:
        click.confirm("Drop and recreate every table?", abort=True)

    LOGGER.info("seed.fresh.reset_schema")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _print_summary(_seed(bool(ctx.obj.get("verbose"))))
