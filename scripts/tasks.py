"""Development checks for weblookup.

Usage: ``python scripts/tasks.py [lint|test|ci]`` (``ci`` by default).
"""

from __future__ import annotations

import argparse
import subprocess
from collections.abc import Sequence

LINT = [
    ["uv", "run", "ruff", "check", "src", "tests"],
    ["uv", "run", "black", "--check", "src", "tests"],
    ["uv", "run", "mypy"],
]
TEST = [["uv", "run", "pytest", "-q", "--cov=weblookup", "--cov-report=term-missing"]]

TASKS: dict[str, list[list[str]]] = {
    "lint": LINT,
    "test": TEST,
    "ci": LINT + TEST,
}


def run_all(commands: Sequence[Sequence[str]]) -> int:
    failed = 0
    for cmd in commands:
        print("$", " ".join(cmd))
        if subprocess.run(cmd).returncode != 0:
            failed += 1
    return 1 if failed else 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("task", nargs="?", default="ci", choices=sorted(TASKS))
    args = parser.parse_args(argv)
    return run_all(TASKS[args.task])


if __name__ == "__main__":
    raise SystemExit(main())
