"""Main entry point when executing merakidash as a package.

This allows running the package using python -m merakidash.
"""

from merakidash.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
