import os

from doit.action import CmdAction


def task_format():
    """Format code using ruff."""

    def router(help=False):
        if help:
            return """echo '
Code Formatter Help
=================

This task runs the ruff formatter to ensure consistent code style:
- Sorts imports (ruff check --select I --fix)
- Formats code (ruff format)

No options required - simply run:
  doit format
  '"""
        return "ruff check --select I --fix . && ruff format . "

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "help",
                "long": "help",
                "default": False,
                "type": bool,
            },
        ],
        "verbosity": 2,
    }


def task_test():
    """Run the test suite with pytest."""

    def router(help=False, keyword=""):
        if help:
            return """echo '
Test Runner Help
================

Runs pytest on the tests/ directory.

Options:
  --keyword EXPR   only run tests matching the pytest -k expression

Example:
  doit test --keyword domain
  '"""
        cmd = "pytest tests"
        if keyword:
            cmd += f" -k {keyword!r}"
        return cmd

    return {
        "actions": [CmdAction(router)],
        "params": [
            {
                "name": "help",
                "long": "help",
                "default": False,
                "type": bool,
            },
            {
                "name": "keyword",
                "long": "keyword",
                "default": os.environ.get("PYSTRIP_TEST_KEYWORD", ""),
                "type": str,
            },
        ],
        "verbosity": 2,
    }
