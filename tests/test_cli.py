from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from axis_scales.cli import app


def _write_csv(tmp_path: Path) -> Path:
    csv_path = tmp_path / "column.csv"
    csv_path.write_text(
        "x,label\n1,a\n2,b\n3,a\n4,c\n5,b\n100,a\n,b\ninf,c\n",
        encoding="utf-8",
    )
    return csv_path


def test_cli_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    assert "describe" in result.stdout
    assert "ticks" in result.stdout


def test_describe_command_reports_column_summary(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app, ["describe", "--csv", str(_write_csv(tmp_path)), "--column", "x"]
    )

    assert result.exit_code == 0, result.stdout
    assert "rows: 8" in result.stdout
    assert "distinct_finite: 6" in result.stdout
    assert "special: 2" in result.stdout
    assert "domain: 1.0 .. 100.0" in result.stdout
    assert "range: 0.0 .. 500.0" in result.stdout


def test_ticks_command_prints_ticks_labels_and_positions(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["ticks", "--csv", str(_write_csv(tmp_path)), "--column", "x", "--count", "3"],
    )

    assert result.exit_code == 0, result.stdout
    lines = result.stdout.strip().splitlines()
    assert lines[0] == "2.0\t2\t94.00"
    assert lines[-1] == "nan\tnan/inf/null\t500.00"
    assert len(lines) == 3


def test_ticks_command_uses_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("output_range: [0, 1000]\nticks:\n  count: 3\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(
        app,
        [
            "ticks",
            "--csv",
            str(_write_csv(tmp_path)),
            "--column",
            "x",
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code == 0, result.stdout
    assert result.stdout.strip().splitlines()[-1] == "nan\tnan/inf/null\t1000.00"


def test_ticks_command_categorical_kind(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["ticks", "--csv", str(_write_csv(tmp_path)), "--column", "label", "--kind", "categorical"],
    )

    assert result.exit_code == 0, result.stdout
    assert result.stdout.strip().splitlines() == [
        "a\ta\t0.00",
        "b\tb\t250.00",
        "c\tc\t500.00",
    ]


def test_cli_rejects_unknown_column_and_kind(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path)
    runner = CliRunner()

    missing = runner.invoke(app, ["describe", "--csv", str(csv_path), "--column", "nope"])
    assert missing.exit_code != 0

    bad_kind = runner.invoke(
        app, ["ticks", "--csv", str(csv_path), "--column", "x", "--kind", "log"]
    )
    assert bad_kind.exit_code != 0
