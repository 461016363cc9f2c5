"""``python -m bwmon_app`` and the ``bwmonitor`` console script."""

from __future__ import annotations

import sys

if __package__:
    from .cli import main as _cli_main
else:
    # Executed as a plain script (runpy, frozen bundle): no parent package.
    from bwmon_app.cli import main as _cli_main

DEFAULT_COMMAND = "run"


def resolve_argv(argv: list[str] | None) -> list[str]:
    args = list(sys.argv[1:] if argv is None else argv)
    return args or [DEFAULT_COMMAND]


def main(argv: list[str] | None = None) -> int:
    return int(_cli_main(resolve_argv(argv)))


if __name__ == "__main__":
    raise SystemExit(main())
