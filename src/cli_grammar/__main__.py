"""Entry point for running the console as a module.

This allows the package to be run with:
    python -m cli_grammar
"""

from __future__ import annotations

from cli_grammar import main

if __name__ == "__main__":
    main()
