from __future__ import annotations
import json
from pathlib import Path
from typing import Any

import click

from ..config import load_typed_config
from ..match.knowledge import Knowledge
from ..version import __version__


def parse_json_arg(text: str, label: str) -> Any:
    """Parse a JSON command-line argument, or the contents of ``@path``.

    Args:
        text: JSON literal, or ``@`` followed by a file path
        label: Argument name used in error messages

    Returns:
        Decoded JSON value

    Raises:
        click.BadParameter: If the file is missing or the JSON is invalid
    """
    if text.startswith('@'):
        path = Path(text[1:])
        if not path.exists():
            raise click.BadParameter(f"File not found: {path}", param_hint=label)
        text = path.read_text(encoding='utf-8')
    try:
        return json.loads(text)
    except ValueError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint=label)


def get_knowledge(cfg: dict) -> Knowledge:
    """Build the schema registry used by CLI commands."""
    if cfg.get('knowledge', {}).get('skills', True):
        from ..skills import skills
        return skills.merged(None)
    return Knowledge()


@click.group()
@click.version_option(version=__version__, prog_name="heuristic-matcher")
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=None, help='Override configured log level')
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """Compile match patterns and score values against heuristic rule sets.

    \b
    Pattern matching:
      hmatch test '{"name": "Regexp:/^ab/i"}' '{"name": "Abc"}'
      hmatch test --regex '/^\\d+$/' '"42"'

    \b
    Heuristic scoring:
      hmatch score rules.json @left.json @right.json
      hmatch score rules.json 10 12 --json

    \b
    Configuration:
      hmatch config            # Show effective settings
      HMATCH__OUTPUT__PRECISION=2 hmatch score ...
    """
    if not isinstance(ctx.obj, dict):
        overrides = {'log_level': log_level.upper()} if log_level else None
        ctx.obj = load_typed_config(overrides).to_dict()


__all__ = ["cli", "parse_json_arg", "get_knowledge"]
