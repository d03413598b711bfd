"""Tests for CLI module."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from subdedupe.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


@pytest.fixture
def store_rows() -> list[dict]:
    """Rows with one junk record and one duplicate pair."""
    return [
        {"id": "1", "title": "ものづくり補助金（第17回）", "max_amount": 1000000, "target_area": ["東京"]},
        {"id": "2", "title": "ものづくり補助金（第18回）", "max_amount": None},
        {"id": "3", "title": "【千代田区】融資・貸付：創業融資あっせん"},
    ]


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "subdedupe" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "clean" in result.output
    assert "similarity" in result.output
    assert "classify" in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# clean command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_clean_applies_changes(runner: CliRunner, write_store, tmp_path: Path, store_rows: list[dict]) -> None:
    """Test clean rewrites the store and prints the report."""
    store = write_store(store_rows)
    out = tmp_path / "out"

    result = runner.invoke(cli, ["clean", str(store), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert "Cleanup report" in result.output
    assert "Records deleted: 2 (were deleted)" in result.output
    assert "Records updated: 1 (were updated)" in result.output

    rows = [json.loads(line) for line in store.read_text(encoding="utf-8").splitlines()]
    assert [r["id"] for r in rows] == ["1"]
    assert rows[0]["target_area"] == ["東京都"]

    assert (out / "run.json").exists()
    assert (out / "events.jsonl").exists()
    assert (out / "artifacts" / "cleanup_plan.json").exists()
    assert (out / "reports" / "cleanup_summary.json").exists()


@pytest.mark.unit
def test_clean_dry_run(runner: CliRunner, write_store, tmp_path: Path, store_rows: list[dict]) -> None:
    """Test --dry-run reports would-be counts and leaves the store alone."""
    store = write_store(store_rows)
    before = store.read_bytes()

    result = runner.invoke(cli, ["clean", str(store), "--dry-run", "-o", str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    assert "Cleanup report (dry run)" in result.output
    assert "Records deleted: 2 (would be deleted)" in result.output
    assert store.read_bytes() == before

    manifest = json.loads((tmp_path / "out" / "run.json").read_text(encoding="utf-8"))
    assert manifest["dry_run"] is True
    assert manifest["status"] == "success"
    assert manifest["snapshot"]["total_records"] == 3
    assert manifest["stages"][0]["counters"]["records_deleted"] == 2


@pytest.mark.unit
def test_clean_store_write_error_reports_failed_ids(
    runner: CliRunner, write_store, tmp_path: Path, store_rows: list[dict]
) -> None:
    """Test write failures are listed per id and the run still exits 0."""
    store = write_store(store_rows)
    store.with_suffix(".jsonl.tmp").mkdir()
    out = tmp_path / "out"

    result = runner.invoke(cli, ["clean", str(store), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert "Cleanup report" in result.output
    assert "Records deleted: 0 (were deleted)" in result.output
    assert "Failed ids:      3" in result.output
    assert "    2: write failed:" in result.output
    assert (out / "reports" / "cleanup_summary.json").exists()

    manifest = json.loads((out / "run.json").read_text(encoding="utf-8"))
    assert manifest["status"] == "success"


@pytest.mark.unit
def test_clean_missing_store(runner: CliRunner, tmp_path: Path) -> None:
    """Test a missing store fails with exit code 1 and a failed manifest."""
    out = tmp_path / "out"

    result = runner.invoke(cli, ["clean", str(tmp_path / "missing.jsonl"), "-o", str(out)])

    assert result.exit_code == 1
    assert "Cleanup failed" in result.output
    assert json.loads((out / "run.json").read_text(encoding="utf-8"))["status"] == "failed"


@pytest.mark.unit
def test_clean_invalid_threshold(runner: CliRunner, write_store, tmp_path: Path) -> None:
    """Test an out-of-range threshold is a usage error."""
    store = write_store([])

    result = runner.invoke(cli, ["clean", str(store), "--threshold", "1.5", "-o", str(tmp_path / "out")])

    assert result.exit_code == 2
    assert "similarity_threshold" in result.output


@pytest.mark.unit
def test_clean_no_missing_amount_pass(runner: CliRunner, write_store, tmp_path: Path) -> None:
    """Test the missing-amount family can be switched off."""
    store = write_store([{"id": "1", "title": "補助金一覧"}])

    result = runner.invoke(
        cli,
        ["clean", str(store), "--dry-run", "--no-missing-amount-pass", "-o", str(tmp_path / "out")],
    )

    assert result.exit_code == 0, result.output
    assert "Junk detected:   0" in result.output


@pytest.mark.unit
def test_clean_verbose(runner: CliRunner, write_store, tmp_path: Path) -> None:
    """Test --verbose lists the run outputs."""
    store = write_store([{"id": "1", "title": "創業助成金", "max_amount": 1}])

    result = runner.invoke(cli, ["clean", str(store), "-v", "-o", str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    assert "Starting cleanup pipeline" in result.output
    assert "manifest:" in result.output


# ---------------------------------------------------------------------------
# similarity command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_similarity_duplicate(runner: CliRunner) -> None:
    """Test decorated titles normalize to the same string."""
    result = runner.invoke(cli, ["similarity", "【令和6年度】省エネ補助金", "省エネ補助金"])

    assert result.exit_code == 0
    assert "A: 省エネ補助金" in result.output
    assert "similarity: 1.0000" in result.output
    assert "duplicate" in result.output


@pytest.mark.unit
def test_similarity_boundary_is_distinct(runner: CliRunner) -> None:
    """Test a score equal to the threshold is not a duplicate."""
    result = runner.invoke(cli, ["similarity", "地域振興", "地域振興券"])

    assert result.exit_code == 0
    assert "similarity: 0.7500" in result.output
    assert "distinct" in result.output


# ---------------------------------------------------------------------------
# classify command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_classify_not_junk(runner: CliRunner) -> None:
    """Test a genuine title."""
    result = runner.invoke(cli, ["classify", "ものづくり補助金"])

    assert result.exit_code == 0
    assert "not junk" in result.output


@pytest.mark.unit
def test_classify_junk_reports_rule(runner: CliRunner) -> None:
    """Test junk titles report category and rule."""
    result = runner.invoke(cli, ["classify", "【千代田区】融資・貸付：創業融資あっせん"])

    assert result.exit_code == 0
    assert "junk (loan)" in result.output
    assert "rule: loan:substring:】融資・貸付：" in result.output


@pytest.mark.unit
def test_classify_no_amount(runner: CliRunner) -> None:
    """Test --no-amount enables the missing-amount family."""
    with_amount = runner.invoke(cli, ["classify", "補助金一覧"])
    without_amount = runner.invoke(cli, ["classify", "補助金一覧", "--no-amount"])

    assert "not junk" in with_amount.output
    assert "junk (navigation)" in without_amount.output
