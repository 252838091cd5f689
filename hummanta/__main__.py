"""
Entry point for running Hummanta CLI as a module.

Usage: python -m hummanta [command] [options]
"""

from hummanta.cli.parser import main

if __name__ == "__main__":
    main()
