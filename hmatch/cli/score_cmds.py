"""Heuristic scoring command."""

from __future__ import annotations
import click
import json as _json
import logging

from .helpers import cli, parse_json_arg
from ..errors import HeuristicMatchError
from ..heuristic.engine import execute, describe_error
from ..heuristic.rules import load_rules
from ..utils.output import section_header, info, warning, score_bar, divider

logger = logging.getLogger(__name__)


@cli.command(name="score")
@click.argument('rules_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('left')
@click.argument('right')
@click.option('--namespace', 'namespace_arg', default=None, help='JSON object (or @file.json) visible to rule expressions')
@click.option('--json', 'as_json', is_flag=True, help='Emit the result as JSON (overrides output.format)')
@click.pass_context
def score(ctx: click.Context, rules_file: str, left: str, right: str, namespace_arg: str | None, as_json: bool):
    """Score LEFT against RIGHT with the rules in RULES_FILE.

    LEFT, RIGHT and --namespace are JSON literals or @file.json references.
    Rules whose values are missing on either side are skipped and do not
    count toward the total.
    """
    cfg = ctx.obj
    output = cfg.get('output', {})
    precision = int(output.get('precision', 3))

    try:
        rules = load_rules(rules_file)
    except (HeuristicMatchError, ValueError) as e:
        raise click.UsageError(f"Cannot load rules from {rules_file}: {e}")

    namespace = parse_json_arg(namespace_arg, '--namespace') if namespace_arg else {}
    if not isinstance(namespace, dict):
        raise click.BadParameter("Namespace must be a JSON object", param_hint='--namespace')

    result = execute(rules, parse_json_arg(left, 'LEFT'), parse_json_arg(right, 'RIGHT'), namespace)
    logger.debug(f"Executed {len(rules)} rules: {len(result.details)} compared, {len(result.errors)} error(s)")

    if as_json or output.get('format') == 'json':
        payload = {
            'score': result.score,
            'total': result.total,
            'similarity': result.similarity,
            'details': {k: (list(v) if isinstance(v, tuple) else v) for k, v in result.details.items()},
            'errors': [describe_error(e) for e in result.errors],
        }
        click.echo(_json.dumps(payload, indent=2, sort_keys=True))
        return

    click.echo(section_header(f"Scoring with {len(rules)} rule(s)"))
    width = max((len(k) for k in result.details), default=0)
    for criteria, detail in result.details.items():
        if isinstance(detail, str):
            click.echo(f"  {criteria.ljust(width)}  {click.style(detail, fg='red')}")
        else:
            achieved, possible = detail
            click.echo(f"  {criteria.ljust(width)}  {score_bar(achieved, possible)} "
                       f"{achieved:.{precision}f}/{possible:.{precision}f}")
    skipped = len(rules) - len(result.details)
    if skipped:
        click.echo(info(f"{skipped} rule(s) skipped (no value to compare)"))
    click.echo(divider())
    if result.similarity is None:
        click.echo(warning("No comparison possible: every rule was skipped"))
    else:
        click.echo(f"Similarity: {click.style(f'{result.similarity:.{precision}f}', fg='cyan', bold=True)} "
                   f"({result.score:.{precision}f}/{result.total:.{precision}f})")
    if output.get('show_errors', True) and result.errors:
        click.echo(warning(f"{len(result.errors)} error(s):"))
        for e in result.errors:
            click.echo(info(describe_error(e)))


__all__ = ["score"]
