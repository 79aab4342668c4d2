"""Entry point for ``python -m match_step``."""

from match_step.cli import app

if __name__ == "__main__":
    app()
