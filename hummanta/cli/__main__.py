"""
Entry point for running Hummanta CLI as a module.

Usage: python -m hummanta.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
