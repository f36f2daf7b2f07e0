"""CLI package for the ChatPulse dashboard

Command-line entry point that loads configuration and runs the
dashboard server.
"""

from cli.main import main

__all__ = [
    "main",
]
