"""Command-line interface for model-parameters."""
