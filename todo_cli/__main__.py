"""Entry point for todo-cli when run as a module.

This allows the package to be run with: python -m todo_cli
"""

import sys

from todo_cli.cli import main

if __name__ == "__main__":
    sys.exit(main())
