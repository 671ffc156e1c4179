"""
Convenience entry point for running weeklyslots as a module.

Usage: python -m weeklyslots [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
