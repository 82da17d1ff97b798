"""
Command-line interface for nanogen.

This package contains the Click CLI: one-shot generation and the web UI launcher.
"""

from nanogen.cli.commands import cli


def main() -> None:
    """Entry point for the nanogen console script."""
    cli()


__all__ = ["cli", "main"]
