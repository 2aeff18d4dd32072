"""Module entry point for running with python -m gitbook2epub."""

from gitbook2epub.cli import run

if __name__ == "__main__":
    run()
