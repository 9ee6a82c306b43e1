"""Entry point for CLI invocation via python -m."""

from ProjectDocs.cli import run

if __name__ == "__main__":
    run()
