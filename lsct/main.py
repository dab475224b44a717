# lsct/main.py
"""Main entry point for the lsct CLI application."""

from lsct.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="lsct")

if __name__ == '__main__':
    entrypoint()
