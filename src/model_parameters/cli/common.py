"""Helpers shared by CLI commands."""

import logging
from pathlib import Path
from typing import Iterable, Optional

import typer
import yaml
from typer.models import OptionInfo

from ..config import load_yaml_config
from ..constants import PATH_SEP
from ..parameters import AbstractParameter
from ..settings import read_pyproject
from ..utils.imports import load_transformers

logger = logging.getLogger(__name__)

# Everything a bad config, override or transformer table can raise
LOAD_ERRORS = (OSError, ImportError, AttributeError, KeyError, TypeError, ValueError, yaml.YAMLError)


def normalize_option_value(value):
    """Support calling the Typer command functions directly in tests."""
    return value.default if isinstance(value, OptionInfo) else value


def error_message(exc: Exception) -> str:
    # KeyError wraps its message in quotes
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc)


def fail(exc: Exception) -> typer.Exit:
    typer.echo(f"Error: {error_message(exc)}", err=True)
    return typer.Exit(1)


def apply_override(tree: AbstractParameter, assignment: str) -> None:
    """Apply ``"path.to.id=value"`` to ``tree``; the value is parsed as YAML.

    Raises:
        ValueError: If ``assignment`` has no ``=``
        ParameterNotFoundError: If a path segment names no child
    """
    path, sep, raw = assignment.partition("=")
    if not sep or not path.strip():
        raise ValueError(f"Malformed override '{assignment}' (expected path=value)")
    node = tree
    for part in path.strip().split(PATH_SEP):
        node = node[part]
    node.set_value(yaml.safe_load(raw))
    logger.info(f"Set {path.strip()} = {raw}")


def load_tree(
    config: Path,
    transformers: Optional[str] = None,
    overrides: Optional[Iterable[str]] = None,
    project_root: Optional[str] = None,
) -> AbstractParameter:
    """Load a tree, install transformers and apply overrides.

    ``transformers`` falls back to ``[tool.model-parameters] transformers``.
    """
    settings = read_pyproject(Path(project_root) if project_root else None)
    entrypoint = transformers or settings.get("transformers")
    table = load_transformers(entrypoint, project_root) if entrypoint else None
    tree = load_yaml_config(config, table)
    for assignment in overrides or []:
        apply_override(tree, assignment)
    return tree


def resolve_seed(seed: Optional[int], project_root: Optional[str] = None) -> Optional[int]:
    """Explicit seed, else ``[tool.model-parameters] seed``, else None."""
    if seed is not None:
        return seed
    return read_pyproject(Path(project_root) if project_root else None).get("seed")
