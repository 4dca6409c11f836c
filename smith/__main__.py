# smith/__main__.py
"""
Allows the CLI to be started with `python -m smith`.
"""
from smith.cli import app

if __name__ == "__main__":
    app()
