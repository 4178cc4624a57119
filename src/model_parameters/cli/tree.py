"""Commands for looking at parameter trees and units."""

from pathlib import Path
from typing import List, Optional

import typer

from ..parameters import (
    AbstractParameter,
    Parameter,
    ParameterBroadcaster,
    ParameterOptions,
    PerturbedParameter,
)
from ..units import default_registry
from .common import LOAD_ERRORS, fail, load_tree, normalize_option_value


def describe(p: AbstractParameter) -> str:
    """One-line summary of a parameter (children not included)."""
    label = p.id if p.name == p.id else f"{p.id} ({p.name})"
    kind = type(p).__name__
    if isinstance(p, PerturbedParameter):
        return f"{label} [{kind}] = {p.value()!r} {p.units} ±{p.perturbation:g}"
    if isinstance(p, Parameter):
        return f"{label} [{kind}] = {p.value()!r} {p.units}"
    if isinstance(p, ParameterOptions):
        return f"{label} [{kind}] selection={p.selection}"
    if isinstance(p, ParameterBroadcaster):
        return f"{label} [{kind}] size={p.broadcast_size}"
    return f"{label} [{kind}]"


def render_tree(p: AbstractParameter) -> List[str]:
    """Indented ``describe`` lines for ``p`` and its descendants."""
    lines: List[str] = []

    def walk(node: AbstractParameter, depth: int) -> None:
        lines.append("  " * depth + describe(node))
        for child in getattr(node, "children", ()):
            walk(child, depth + 1)

    walk(p, 0)
    return lines


def show_command(
    config: Path = typer.Argument(..., help="YAML parameter file"),
    transformers: Optional[str] = typer.Option(
        None, "--transformers", "-t", help="Transformer table as module:NAME or file.py:NAME"
    ),
    project_root: Optional[str] = typer.Option(None, "--project-root", help="Project root (default: cwd)"),
):
    """Print the parameter tree of a YAML file."""
    transformers = normalize_option_value(transformers)
    project_root = normalize_option_value(project_root)
    try:
        tree = load_tree(config, transformers, project_root=project_root)
    except LOAD_ERRORS as e:
        raise fail(e)

    for line in render_tree(tree):
        typer.echo(line)


def convert_command(
    value: float = typer.Argument(..., help="Value to convert"),
    from_unit: str = typer.Argument(..., help="Unit of the value"),
    to_unit: str = typer.Argument("SI", help="Target unit; SI when omitted"),
):
    """Convert a value between registered units."""
    try:
        if to_unit == "SI":
            result = default_registry.to_si(value, from_unit)
        else:
            result = default_registry.convert(value, from_unit, to_unit)
    except KeyError as e:
        raise fail(e)
    typer.echo(f"{result:.15g}")


def units_command():
    """List registered units."""
    for unit in default_registry.units():
        typer.echo(unit)
