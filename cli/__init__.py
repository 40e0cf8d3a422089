"""Command line tools for the air-quality trends service; the Typer app lives in ``cli.app``."""
