"""
Entry point for running SafeSpace as a module.

Usage:
    python -m safespace detect image.jpg
"""

from .cli import main

if __name__ == "__main__":
    main()
