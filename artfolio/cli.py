"""
CLI entry point for Artfolio.

Usage:
    # Run the API server
    python -m artfolio.cli serve --port 8000

    # Create the SQL tables (storage_backend=sql)
    python -m artfolio.cli init-db

    # Print the base slug for some text
    python -m artfolio.cli slugify "Jane Doe"
"""

import argparse
import logging
import sys

from artfolio.core.config import settings
from artfolio.domain.portfolio.slug import slugify
from artfolio.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the API server with uvicorn."""
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.project_name, args.host, args.port)
    uvicorn.run("artfolio.main:app", host=args.host, port=args.port, reload=args.reload)


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create any missing tables in the configured SQL database."""
    from artfolio.domain.portfolio.errors import StorageError
    from artfolio.infrastructure.portfolio.sql_storage import SqlStorageAdapter

    url = args.database_url or settings.get_database_url()
    storage = SqlStorageAdapter.from_url(url, echo=settings.sql_echo)
    try:
        storage.ensure_schema()
    except StorageError as exc:
        logger.error("Could not create schema: %s", exc.message)
        sys.exit(1)
    finally:
        storage.close()


def cmd_slugify(args: argparse.Namespace) -> None:
    """Print the base slug for the given text."""
    print(slugify(" ".join(args.text)))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Artfolio CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Serve
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    serve_parser.add_argument(
        "--port", type=int, default=8000, help="Port for the API server (default 8000)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Reload on code changes (development)"
    )
    serve_parser.set_defaults(func=cmd_serve)

    # Init DB
    init_parser = subparsers.add_parser("init-db", help="Create SQL tables")
    init_parser.add_argument(
        "--database-url", default=None, dest="database_url",
        help="SQLAlchemy URL; defaults to the configured database",
    )
    init_parser.set_defaults(func=cmd_init_db)

    # Slugify
    slug_parser = subparsers.add_parser("slugify", help="Print the base slug for text")
    slug_parser.add_argument("text", nargs="+", help="Text to turn into a slug")
    slug_parser.set_defaults(func=cmd_slugify)

    return parser


def main(argv: list[str] | None = None) -> None:
    configure_logging(level=settings.log_level)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
