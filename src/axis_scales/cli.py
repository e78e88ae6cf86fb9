from __future__ import annotations

from pathlib import Path

import pandas as pd
import typer

from axis_scales.config import AppConfig, load_config
from axis_scales.factory import SCALE_KINDS, build_column_scale, count_special
from axis_scales.logging import configure_logging
from axis_scales.numeric import build_value_set
from axis_scales.scales.base import Scale

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    if config_path is None:
        return AppConfig()
    return load_config(config_path)


def _read_column(csv: Path, column: str) -> list[object]:
    # Read as text so blanks and "inf"/"NaN" spellings reach the classifier untouched.
    df = pd.read_csv(csv, encoding="utf-8-sig", dtype=str, keep_default_na=False)
    if column not in df.columns:
        raise typer.BadParameter(
            f"Column {column!r} not found. Available: {', '.join(df.columns)}",
            param_hint="--column",
        )
    return df[column].tolist()


def _build_scale(values: list[object], kind: str, cfg: AppConfig) -> Scale:
    if kind not in SCALE_KINDS:
        raise typer.BadParameter(
            f"Expected one of {', '.join(SCALE_KINDS)}", param_hint="--kind"
        )
    try:
        return build_column_scale(values, kind=kind, config=cfg)  # type: ignore[arg-type]
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--column") from exc


@app.command()
def describe(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    column: str = typer.Option(..., help="Column to lay out."),
    kind: str = typer.Option("percentile", help="percentile, linear, timestamp or categorical."),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
) -> None:
    """Summarize the scale built for one CSV column."""
    cfg = _load_app_config(config)
    configure_logging(cfg.log_level)
    values = _read_column(csv, column)
    scale = _build_scale(values, kind, cfg)

    domain = list(scale.domain())
    output_range = scale.range()
    typer.echo(f"column: {column}")
    typer.echo(f"kind: {kind}")
    typer.echo(f"rows: {len(values)}")
    typer.echo(f"distinct_finite: {build_value_set(values).size}")
    typer.echo(f"special: {count_special(values)}")
    if domain:
        typer.echo(f"domain: {domain[0]} .. {domain[-1]}")
    typer.echo(f"range: {output_range[0]} .. {output_range[1]}")


@app.command()
def ticks(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    column: str = typer.Option(..., help="Column to lay out."),
    kind: str = typer.Option("percentile", help="percentile, linear, timestamp or categorical."),
    count: int | None = typer.Option(None, min=1, help="Tick count (defaults to config)."),
    config: Path | None = typer.Option(None, exists=True, readable=True, resolve_path=True),
) -> None:
    """Print tick values, labels and output positions for one CSV column."""
    cfg = _load_app_config(config)
    configure_logging(cfg.log_level)
    values = _read_column(csv, column)
    scale = _build_scale(values, kind, cfg)

    tick_count = count or cfg.ticks.count
    formatter = scale.tick_format(tick_count)
    for tick in scale.ticks(tick_count):
        typer.echo(f"{tick}\t{formatter(tick)}\t{scale(tick):.2f}")
