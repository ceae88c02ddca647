"""
Tests for the command-line entry point.
"""

from unittest.mock import patch

import pytest
from sqlalchemy import create_engine, inspect

from artfolio.cli import build_parser, main


class TestParser:
    """Argument parsing for each subcommand."""

    def test_serve_defaults(self) -> None:
        args = build_parser().parse_args(["serve"])
        assert args.host == "0.0.0.0"
        assert args.port == 8000
        assert args.reload is False

    def test_command_is_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestCommands:
    """Running the subcommands end to end."""

    def test_slugify_prints_base_slug(self, capsys) -> None:
        main(["slugify", "Jane", "Doe"])
        assert capsys.readouterr().out.strip() == "jane-doe"

    def test_serve_runs_uvicorn(self) -> None:
        with patch("uvicorn.run") as run:
            main(["serve", "--port", "9000"])

        run.assert_called_once_with(
            "artfolio.main:app", host="0.0.0.0", port=9000, reload=False
        )

    def test_init_db_creates_tables(self, tmp_path) -> None:
        url = f"sqlite:///{tmp_path / 'artfolio.db'}"

        main(["init-db", "--database-url", url])

        engine = create_engine(url)
        try:
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        assert {"users", "portfolios", "images", "events"} <= tables

    def test_init_db_unreachable_exits_1(self, tmp_path) -> None:
        url = f"sqlite:///{tmp_path / 'missing' / 'nested' / 'artfolio.db'}"

        with pytest.raises(SystemExit) as exc_info:
            main(["init-db", "--database-url", url])

        assert exc_info.value.code == 1
