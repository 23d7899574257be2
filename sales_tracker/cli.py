# sales_tracker/cli.py
import click
import uvicorn
from dotenv import load_dotenv

from sales_tracker.config import load_settings
from sales_tracker.errors import SeedError
from sales_tracker.logging_config import setup_logging
from sales_tracker.seed import seed_database
from sales_tracker.web import create_app

config_option = click.option(
    '--config', 'config_path',
    default='config.yaml',
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used when it does not exist)'
)
env_file_option = click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with SALES_* overrides'
)
db_option = click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)


@click.group()
def main():
    """Seed and serve the product sales dashboard API."""


@main.command()
@config_option
@env_file_option
@db_option
@click.option('--url', 'seed_url', default=None, help='Seed dataset URL (overrides config)')
@click.option(
    '--force',
    is_flag=True,
    default=False,
    help='Append the dataset even if the database already holds transactions'
)
def seed(config_path, env_file, db_path, seed_url, force):
    """Fetch the remote dataset and store it in the database."""
    if env_file:
        load_dotenv(env_file)

    settings = load_settings(config_path, db_path=db_path, seed_url=seed_url)
    setup_logging(settings.log_level, settings.log_file)
    try:
        inserted = seed_database(
            settings.db_path,
            settings.seed_url,
            force=force,
            timeout=settings.seed_timeout,
        )
    except SeedError as e:
        raise click.ClickException(str(e))

    click.echo(f"Stored {inserted} transaction(s) in {settings.db_path}.")


@main.command()
@config_option
@env_file_option
@db_option
@click.option('--host', default=None, help='Host to bind (overrides config)')
@click.option('--port', default=None, type=int, help='Port to bind (overrides config)')
@click.option(
    '--seed/--no-seed', 'seed_on_startup',
    default=None,
    help='Seed the database at startup (overrides config)'
)
def serve(config_path, env_file, db_path, host, port, seed_on_startup):
    """Run the HTTP API."""
    if env_file:
        load_dotenv(env_file)

    settings = load_settings(
        config_path,
        db_path=db_path,
        host=host,
        port=port,
        seed_on_startup=seed_on_startup,
    )
    app = create_app(settings)
    click.echo(
        f"Sales dashboard API running at http://{settings.host}:{settings.port} (db: {settings.db_path})"
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
