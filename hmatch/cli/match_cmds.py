"""Pattern test command."""

from __future__ import annotations
import click
import logging

from .helpers import cli, parse_json_arg, get_knowledge
from ..errors import HeuristicMatchError
from ..match.compiler import compile_pattern, compile_regexp
from ..utils.output import success, error

logger = logging.getLogger(__name__)


@cli.command(name="test")
@click.argument('pattern')
@click.argument('values', nargs=-1, required=True)
@click.option('--regex', is_flag=True, help='Treat PATTERN as a raw regular-expression descriptor (e.g. /^a/i)')
@click.pass_context
def test_pattern(ctx: click.Context, pattern: str, values: tuple, regex: bool):
    """Test one or more JSON VALUES against a JSON PATTERN.

    Arguments may be JSON literals or @file.json references. Exits with
    status 1 when any value does not match.
    """
    cfg = ctx.obj
    knowledge = get_knowledge(cfg)
    try:
        if regex:
            tester = compile_regexp(knowledge, pattern)
        else:
            tester = compile_pattern(knowledge, parse_json_arg(pattern, 'PATTERN'))
    except HeuristicMatchError as e:
        raise click.UsageError(f"Cannot compile pattern: {e}")

    failed = 0
    for raw in values:
        value = parse_json_arg(raw, 'VALUE')
        if tester.test(value):
            click.echo(success(f"match     {raw}"))
        else:
            failed += 1
            click.echo(error(f"no match  {raw}"))
    logger.debug(f"Tested {len(values)} value(s) with {type(tester).__name__}, {failed} failed")
    if failed:
        ctx.exit(1)


__all__ = ["test_pattern"]
