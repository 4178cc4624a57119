"""Text helpers used by CLI commands."""

import re
from pathlib import Path


def slugify(value: str, max_length: int = 64, default: str = "parameters") -> str:
    """Lowercase ``value`` and keep only filename-safe characters."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")
    return slug[:max_length].rstrip("-") or default


def default_output_path(name: str, suffix: str) -> Path:
    """Output path in the cwd named after ``name``, e.g. ``idealgas-samples.csv``."""
    return Path(f"{slugify(name)}-samples{suffix}")
