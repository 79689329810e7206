# fpr/main.py
"""Main entry point for the fpr CLI application."""

from fpr.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="fpr")

if __name__ == '__main__':
    entrypoint()
