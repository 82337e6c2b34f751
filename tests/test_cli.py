"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from openpyxl import load_workbook

from tabular_consolidator import cli


@pytest.fixture(autouse=True)
def _quiet_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI runs from reconfiguring global logging or reading a .env file."""
    monkeypatch.setattr(cli, "configure_logging", lambda verbose: None)
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def csv_files(tmp_path: Path) -> list[Path]:
    """Write the two-sheet customer scenario as CSV files."""
    crm = tmp_path / "crm.csv"
    crm.write_text("CustID,Name\n1,Acme\n2,Globex\n")
    billing = tmp_path / "billing.csv"
    billing.write_text('CustomerID,Revenue\n1,"$1,200"\n3,$500\n')
    return [crm, billing]


class TestParser:
    """Tests for argument parsing."""

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_merge_defaults(self) -> None:
        args = cli.build_parser().parse_args(["merge", "a.xlsx"])
        assert args.output == Path("consolidated.xlsx")
        assert args.json_output is None
        assert args.enrich is False
        assert args.verbose is False

    def test_ask_takes_files_then_question(self) -> None:
        args = cli.build_parser().parse_args(["ask", "a.xlsx", "b.csv", "Who spent most?"])
        assert args.files == [Path("a.xlsx"), Path("b.csv")]
        assert args.question == "Who spent most?"


class TestMergeCommand:
    """Tests for the merge command."""

    def test_writes_workbook_and_json(
        self, tmp_path: Path, csv_files: list[Path], capsys: pytest.CaptureFixture
    ) -> None:
        output = tmp_path / "merged.xlsx"
        report = tmp_path / "report.json"

        cli.main(["merge", *map(str, csv_files), "-o", str(output), "--json", str(report)])

        rows = list(load_workbook(output).active.iter_rows(values_only=True))
        assert rows[0] == ("Customer ID", "Name", "Revenue")
        assert len(rows) == 4
        assert json.loads(report.read_text())["primary_key"] == "Customer ID"
        assert "Workbook saved" in capsys.readouterr().out

    def test_enrich_without_key_skips(
        self, tmp_path: Path, csv_files: list[Path], capsys: pytest.CaptureFixture
    ) -> None:
        cli.main(["merge", *map(str, csv_files), "-o", str(tmp_path / "m.xlsx"), "--enrich"])
        assert "skipping enrichment" in capsys.readouterr().out

    def test_missing_file_exits_with_error(
        self, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["merge", str(tmp_path / "missing.xlsx")])

        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().out


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_prints_analysis(self, csv_files: list[Path], capsys: pytest.CaptureFixture) -> None:
        cli.main(["analyze", *map(str, csv_files)])

        out = capsys.readouterr().out
        assert "Similarity groups" in out
        assert "Customer ID" in out


class TestAskCommand:
    """Tests for the ask command."""

    def test_missing_api_key(self, csv_files: list[Path], capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["ask", *map(str, csv_files), "Who spent most?"])

        assert exc_info.value.code == 1
        assert "OPENAI_API_KEY" in capsys.readouterr().out
