"""Entry point for python -m testimony_prep"""

from testimony_prep.cli.main import app

if __name__ == "__main__":
    app()
