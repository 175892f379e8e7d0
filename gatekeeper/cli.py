"""
CLI for the command gatekeeper.

Runs the PreToolUse hook and provides dry-run tools for checking how a
command would be classified.
"""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from gatekeeper import __version__
from gatekeeper.chain_parser import Chain, parse_chained_command
from gatekeeper.hook import RedactingFilter
from gatekeeper.protocol import build_output
from gatekeeper.rules import ALLOW_RULES, DENY_RULES, GIT_PUSH_REASON


console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity. Every root handler redacts secrets."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())


@click.group()
@click.version_option(__version__, prog_name="gatekeeper")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(verbose: bool):
    """Gatekeeper - auto-approve or block agent shell commands."""
    setup_logging(verbose)


@main.command()
def hook():
    """
    Run the PreToolUse hook: read the envelope from stdin, print the decision.

    Exits 0 with no output to defer, 1 if the envelope is malformed.
    """
    from gatekeeper.hook import main as hook_main

    hook_main()


@main.command()
@click.argument("command")
@click.option("--json", "as_json", is_flag=True, help="Print the raw hook decision object")
def check(command: str, as_json: bool):
    """
    Evaluate COMMAND as if it were a Bash tool call.
    """
    from gatekeeper.evaluator import evaluate_command

    verdict = evaluate_command(command)

    if as_json:
        # Same bytes the hook writes; nothing at all on defer
        output = build_output(verdict)
        if output is not None:
            click.echo(output, nl=False)
        return

    if verdict is None:
        console.print("[yellow]PASSTHROUGH[/yellow] no verdict, deferred to review")
        return

    style = "green" if verdict.allowed else "red"
    console.print(f"[{style}]{verdict.decision.upper()}[/{style}] {escape(verdict.reason)}", highlight=False, soft_wrap=True)


@main.command()
@click.argument("command")
def parse(command: str):
    """
    Show how COMMAND is split by the chain parser.
    """
    result = parse_chained_command(command.strip())
    console.print(f"[bold]{result.kind}[/bold]")
    if isinstance(result, Chain):
        for i, part in enumerate(result.parts, 1):
            console.print(f"  {i}. {part}", markup=False, highlight=False, soft_wrap=True)


@main.command()
def rules():
    """List deny and allow rules in priority order."""
    table = Table(title="Gatekeeper rules")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind")
    table.add_column("Pattern", style="cyan", overflow="fold")
    table.add_column("Reason")

    for i, rule in enumerate(DENY_RULES, 1):
        table.add_row(str(i), "[red]deny[/red]", Text(rule.pattern.pattern), Text(rule.reason))
    for i, rule in enumerate(ALLOW_RULES, 1):
        table.add_row(str(i), "[green]allow[/green]", Text(rule.pattern.pattern), Text(rule.reason))
    table.add_row("", "[green]allow[/green]", "git push (no --force / -f)", GIT_PUSH_REASON)

    console.print(table)


if __name__ == "__main__":
    sys.exit(main())
