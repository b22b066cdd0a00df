"""Main entry point when executing cordrest as a package.

This allows running the package using python -m cordrest.
"""

from cordrest.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
