"""Allow `python -m flashdeck` to start the study shell."""

from __future__ import annotations

from .main import run


def main() -> None:
    """Run the shell and exit with its status code."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main()
