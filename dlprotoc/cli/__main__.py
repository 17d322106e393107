"""
Entry point for running the dlprotoc CLI as a module.

Usage: python -m dlprotoc.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
