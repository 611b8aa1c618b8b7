"""Tests for CLI commands."""

import pytest

from vparecon.cli.main import cli


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.db")


def _invoke(cli_runner, db_path, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", db_path, *args], **kwargs)


class TestRegistrantCommands:
    """Tests for the registrant command group."""

    def test_add_and_list(self, cli_runner, db_path):
        result = _invoke(
            cli_runner, db_path, "registrant", "add", "--vpa", "alice@ybl", "--phone", "9876543210"
        )
        assert result.exit_code == 0
        assert "Created registrant 'alice@ybl'" in result.output

        result = _invoke(cli_runner, db_path, "registrant", "list")
        assert result.exit_code == 0
        assert "alice@ybl" in result.output
        assert "of 1" in result.output

    def test_list_empty(self, cli_runner, db_path):
        result = _invoke(cli_runner, db_path, "registrant", "list")
        assert result.exit_code == 0
        assert "No registrants found." in result.output

    def test_add_invalid(self, cli_runner, db_path):
        result = _invoke(cli_runner, db_path, "registrant", "add", "--vpa", "bad vpa", "--phone", "9876543210")
        assert result.exit_code == 1
        assert "Error: Invalid VPA format" in result.output

    def test_show_missing(self, cli_runner, db_path):
        result = _invoke(cli_runner, db_path, "registrant", "show", "42")
        assert result.exit_code == 1
        assert "Registrant 42 not found" in result.output

    def test_edit(self, cli_runner, db_path):
        _invoke(cli_runner, db_path, "registrant", "add", "--vpa", "alice@ybl", "--phone", "9876543210")

        result = _invoke(cli_runner, db_path, "registrant", "edit", "1", "--route-no", "R4")
        assert result.exit_code == 0
        assert "Updated registrant 1" in result.output

        result = _invoke(cli_runner, db_path, "registrant", "show", "1")
        assert "R4" in result.output

    def test_edit_nothing(self, cli_runner, db_path):
        result = _invoke(cli_runner, db_path, "registrant", "edit", "1")
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_delete_with_confirmation(self, cli_runner, db_path):
        _invoke(cli_runner, db_path, "registrant", "add", "--vpa", "alice@ybl", "--phone", "9876543210")

        result = _invoke(cli_runner, db_path, "registrant", "delete", "1", input="n\n")
        assert "Deletion cancelled." in result.output

        result = _invoke(cli_runner, db_path, "registrant", "delete", "1", "--yes")
        assert result.exit_code == 0
        assert "Deleted registrant 'alice@ybl'" in result.output

    def test_bulk_delete(self, cli_runner, db_path, tmp_path):
        for i in range(3):
            _invoke(
                cli_runner, db_path, "registrant", "add", "--vpa", f"user{i}@ybl", "--phone", f"900000000{i}"
            )
        ids_file = tmp_path / "ids.txt"
        ids_file.write_text("2\n3\n\n")

        result = _invoke(
            cli_runner, db_path, "registrant", "bulk-delete", "1", "--ids-file", str(ids_file), "--yes"
        )

        assert result.exit_code == 0
        assert "Bulk delete success" in result.output
        assert "Deleted: 3" in result.output

    def test_bulk_delete_verify_missing(self, cli_runner, db_path):
        _invoke(cli_runner, db_path, "registrant", "add", "--vpa", "alice@ybl", "--phone", "9876543210")

        result = _invoke(cli_runner, db_path, "registrant", "bulk-delete", "1", "5", "--verify", "--yes")

        assert result.exit_code == 1
        assert "The following IDs were not found: 5" in result.output

    def test_bulk_delete_unprivileged(self, cli_runner, db_path, monkeypatch):
        monkeypatch.setenv("VPARECON_PRIVILEGED_STORE", "false")

        result = _invoke(cli_runner, db_path, "registrant", "bulk-delete", "1", "--yes")

        assert result.exit_code == 1
        assert "privileged" in result.output


class TestImportCommand:
    """Tests for the import command."""

    def test_import_fixture(self, cli_runner, db_path, fixtures_dir):
        result = _invoke(cli_runner, db_path, "import", str(fixtures_dir / "registrants.csv"))

        assert result.exit_code == 0
        assert "Accepted: 3 rows" in result.output
        assert "Written: 3 registrants" in result.output
        assert "Rejected: 2 rows" in result.output
        assert "Row 5: Invalid VPA format" in result.output

    def test_import_insert_only_twice(self, cli_runner, db_path, fixtures_dir):
        path = str(fixtures_dir / "registrants.csv")
        _invoke(cli_runner, db_path, "import", path)

        result = _invoke(cli_runner, db_path, "import", path, "--policy", "insert_only")

        assert result.exit_code == 1
        assert "Duplicate entries: 1 batch(es)" in result.output
        assert "duplicate_entry" in result.output

    def test_import_strict_rejects_file(self, cli_runner, db_path, fixtures_dir):
        result = _invoke(cli_runner, db_path, "import", str(fixtures_dir / "registrants.csv"), "--strict")

        assert result.exit_code == 1
        assert "Error: Row 4:" in result.output

        result = _invoke(cli_runner, db_path, "registrant", "list")
        assert "No registrants found." in result.output

    def test_import_missing_columns(self, cli_runner, db_path, fixtures_dir):
        result = _invoke(cli_runner, db_path, "import", str(fixtures_dir / "registrants_missing_vpa.csv"))

        assert result.exit_code == 1
        assert "Missing required columns" in result.output

    def test_import_bad_conflict_key(self, cli_runner, db_path, fixtures_dir):
        result = _invoke(
            cli_runner,
            db_path,
            "import",
            str(fixtures_dir / "registrants.csv"),
            "--policy",
            "upsert",
            "--conflict-key",
            "name",
        )

        assert result.exit_code == 1
        assert "Unsupported conflict key" in result.output


class TestReconcileCommand:
    """Tests for the reconcile command."""

    def test_reconcile(self, cli_runner, db_path, fixtures_dir):
        _invoke(cli_runner, db_path, "import", str(fixtures_dir / "registrants.csv"))

        result = _invoke(
            cli_runner, db_path, "reconcile", str(fixtures_dir / "statement.csv"), "--show-unmatched"
        )

        assert result.exit_code == 0
        assert "Transactions: 4" in result.output
        assert "Matched: 3" in result.output
        assert "Unmatched: 1" in result.output
        assert "Skipped row 5" in result.output
        assert "1234567890@paytm" in result.output

    def test_reconcile_without_registry(self, cli_runner, db_path, fixtures_dir):
        result = _invoke(cli_runner, db_path, "reconcile", str(fixtures_dir / "statement.csv"))

        assert result.exit_code == 1
        assert "No registry data" in result.output


def test_bad_config_env(cli_runner, db_path, monkeypatch):
    monkeypatch.setenv("VPARECON_MAX_IMPORT_BATCH_SIZE", "zero")

    result = _invoke(cli_runner, db_path, "registrant", "list")

    assert result.exit_code == 1
    assert "VPARECON_MAX_IMPORT_BATCH_SIZE" in result.output
