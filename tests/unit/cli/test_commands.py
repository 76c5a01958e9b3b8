"""Unit tests for CLI commands."""

from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from notekeeper.backend.core.exceptions import ConflictError, NotFoundError
from notekeeper.cli.commands.notes import _preview
from notekeeper.cli.main import app
from notekeeper.cli.runtime import run_command

runner = CliRunner()


class TestNoteCommands:
    """Tests for note command help."""

    def test_notes_list_help(self) -> None:
        """Test notes list command help."""
        result = runner.invoke(app, ["notes", "list", "--help"])
        assert result.exit_code == 0
        assert "newest first" in result.stdout

    def test_notes_add_help(self) -> None:
        """Test notes add command help."""
        result = runner.invoke(app, ["notes", "add", "--help"])
        assert result.exit_code == 0
        assert "--text" in result.stdout

    def test_notes_refresh_help(self) -> None:
        """Test notes refresh command help."""
        result = runner.invoke(app, ["notes", "refresh", "--help"])
        assert result.exit_code == 0
        assert "bypassing the cache" in result.stdout


class TestTagCommands:
    """Tests for tag command help."""

    def test_tags_create_help(self) -> None:
        """Test tags create command help."""
        result = runner.invoke(app, ["tags", "create", "--help"])
        assert result.exit_code == 0
        assert "--color" in result.stdout

    def test_tags_create_rejects_bad_color(self) -> None:
        """Should refuse a color that is not #RRGGBB before touching storage."""
        with patch("notekeeper.cli.commands.tags.run_command") as mock_run:
            result = runner.invoke(app, ["tags", "create", "work", "-c", "blue"])

        assert result.exit_code == 1
        assert "Error" in result.stdout
        mock_run.assert_not_called()


class TestMainApp:
    """Tests for main app options."""

    def test_no_args_shows_help(self) -> None:
        """Should print usage when called without a command."""
        result = runner.invoke(app, [])
        assert "notes" in result.stdout
        assert "tags" in result.stdout

    def test_unknown_backend_rejected(self) -> None:
        """Should reject a backend other than file or sqlite."""
        result = runner.invoke(app, ["--backend", "cloud", "notes", "list"])
        assert result.exit_code != 0


class TestRunCommand:
    """Tests for the coroutine runner shared by commands."""

    def test_returns_result(self) -> None:
        async def work():
            return 42

        assert run_command(work()) == 42

    @pytest.mark.parametrize("error", [NotFoundError("gone"), ConflictError("taken")])
    def test_application_error_exits_with_status_one(self, error) -> None:
        async def work():
            raise error

        with pytest.raises(typer.Exit) as exc_info:
            run_command(work())

        assert exc_info.value.exit_code == 1

    def test_other_errors_propagate(self) -> None:
        async def work():
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            run_command(work())


class TestPreview:
    """Tests for the list preview column."""

    def test_first_line_only(self) -> None:
        assert _preview("first\nsecond") == "first"

    def test_truncates_long_lines(self) -> None:
        preview = _preview("x" * 100)
        assert len(preview) == 60
        assert preview.endswith("…")

    def test_blank_text(self) -> None:
        assert _preview("   ") == ""
