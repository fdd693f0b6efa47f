"""Module entry point for `python -m hmatch.cli`."""
from __future__ import annotations

if __name__ == "__main__":  # pragma: no cover (invocation driven)
    from hmatch.cli import cli

    cli()
