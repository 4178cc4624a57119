"""Commands that evaluate parameter trees."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import polars as pl
import typer

from .. import rng
from ..parameters import AbstractParameter
from ..utils.records import flatten, to_python
from ..utils.text import default_output_path
from .common import LOAD_ERRORS, fail, load_tree, normalize_option_value, resolve_seed

SAMPLE_COL = "sample"
ITEM_COL = "item"


def draw_samples(tree: AbstractParameter, n_samples: int) -> pl.DataFrame:
    """Transform ``tree`` ``n_samples`` times into a DataFrame.

    Each transform becomes one row of flattened columns. A broadcaster's list
    result contributes one row per item, numbered in the ``item`` column.
    """
    rows: List[Dict[str, Any]] = []
    for i in range(n_samples):
        result = tree.transform()
        if isinstance(result, list):
            for j, item in enumerate(result):
                rows.append({SAMPLE_COL: i, ITEM_COL: j, **flatten(item)})
        else:
            rows.append({SAMPLE_COL: i, **flatten(result)})
    return pl.DataFrame(rows)


def write_frame(df: pl.DataFrame, output_path: Path) -> None:
    """Write CSV or Parquet depending on the file suffix."""
    if output_path.suffix == ".parquet":
        df.write_parquet(output_path)
    elif output_path.suffix == ".csv":
        df.write_csv(output_path)
    else:
        raise ValueError(f"Unsupported output format '{output_path.suffix}' (use .csv or .parquet)")


def transform_command(
    config: Path = typer.Argument(..., help="YAML parameter file"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for perturbations"),
    transformers: Optional[str] = typer.Option(
        None, "--transformers", "-t", help="Transformer table as module:NAME or file.py:NAME"
    ),
    overrides: Optional[List[str]] = typer.Option(None, "--set", help="Override a value (path.to.id=value)"),
    project_root: Optional[str] = typer.Option(None, "--project-root", help="Project root (default: cwd)"),
):
    """Print the transformed value of a parameter tree as JSON."""
    seed = normalize_option_value(seed)
    transformers = normalize_option_value(transformers)
    overrides = normalize_option_value(overrides)
    project_root = normalize_option_value(project_root)

    try:
        tree = load_tree(config, transformers, overrides, project_root)
        seed = resolve_seed(seed, project_root)
    except LOAD_ERRORS as e:
        raise fail(e)

    if seed is not None:
        rng.seed(seed)
    typer.echo(json.dumps(to_python(tree.transform()), indent=2, default=str))


def sample_command(
    config: Path = typer.Argument(..., help="YAML parameter file"),
    n_samples: int = typer.Option(100, "--n-samples", "-n", help="Number of transforms to draw"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output .csv or .parquet (defaults to <id>-samples.csv)"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for perturbations"),
    transformers: Optional[str] = typer.Option(
        None, "--transformers", "-t", help="Transformer table as module:NAME or file.py:NAME"
    ),
    overrides: Optional[List[str]] = typer.Option(None, "--set", help="Override a value (path.to.id=value)"),
    project_root: Optional[str] = typer.Option(None, "--project-root", help="Project root (default: cwd)"),
):
    """Draw repeated transforms of a parameter tree into a table."""
    n_samples = normalize_option_value(n_samples)
    output = normalize_option_value(output)
    seed = normalize_option_value(seed)
    transformers = normalize_option_value(transformers)
    overrides = normalize_option_value(overrides)
    project_root = normalize_option_value(project_root)

    if n_samples < 1:
        typer.echo("Error: --n-samples must be at least 1", err=True)
        raise typer.Exit(1)

    try:
        tree = load_tree(config, transformers, overrides, project_root)
        seed = resolve_seed(seed, project_root)
    except LOAD_ERRORS as e:
        raise fail(e)

    output_path = Path(output) if output else default_output_path(tree.id, ".csv")
    if output is None:
        typer.echo(f"[info]Using default output path {output_path.name} (set --output to override)")

    if seed is not None:
        rng.seed(seed)
    try:
        df = draw_samples(tree, n_samples)
        write_frame(df, output_path)
    except (OSError, ValueError, pl.exceptions.PolarsError) as e:
        raise fail(e)

    typer.echo(f"✓ Wrote {df.height} rows × {df.width} columns to {output_path}")
