"""Command-line interface for bibnorm."""

from bibnorm.cli.main import cli

__all__ = ["cli"]
